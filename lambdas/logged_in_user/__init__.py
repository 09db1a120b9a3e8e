"""
LoggedInUser Function

Returns the user record of the authenticated caller.
"""

from lambdas.logged_in_user.handler import get_user, lambda_handler, logged_in_user

__all__ = [
    "lambda_handler",
    "logged_in_user",
    "get_user",
]
