# Shared Tools
"""
Collaborator clients: GraphQL backend executor and email-template senders.
"""

from helpout.shared.tools.email import (
    EmailAddress,
    MailjetTemplateSender,
    SESTemplateSender,
    SendResult,
    TemplateMessage,
    TemplateSender,
    build_mail_sender,
)
from helpout.shared.tools.graphql import GraphQLClient, build_graphql_client

__all__ = [
    # GraphQL
    "GraphQLClient",
    "build_graphql_client",
    # Email
    "EmailAddress",
    "TemplateMessage",
    "SendResult",
    "TemplateSender",
    "MailjetTemplateSender",
    "SESTemplateSender",
    "build_mail_sender",
]
