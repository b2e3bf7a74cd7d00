from app.config import settings


def is_admin_email_allowed(email: str) -> bool:
    """Emails listed in ADMIN_EMAILS register with the admin role"""
    return bool(email) and email.strip().lower() in settings.admin_email_list
