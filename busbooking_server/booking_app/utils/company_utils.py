"""Utility functions for company management"""


def get_company_for_user(user):
    """
    Get the Company administered by a user.

    Args:
        user: Django User instance

    Returns:
        Company instance

    Raises:
        ValueError: If user is not a company admin or has no company yet
    """
    profile = getattr(user, 'profile', None)
    if profile is None or not profile.is_company_admin:
        raise ValueError(f"User {user.username} is not a company admin")
    if profile.company is None:
        raise ValueError(f"User {user.username} has not created a company yet")
    return profile.company
