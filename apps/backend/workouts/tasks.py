import logging

from celery import shared_task
from django.conf import settings
from django.contrib.auth.models import User
from django.core.mail import send_mail

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Reset your Workout Planner password"
RESET_TEXT = (
    "You requested a password reset for your Workout Planner account. "
    "Open the link below to set a new password:\n\n{url}\n\n"
    "If you did not make this request you can safely ignore this email."
)
RESET_HTML = (
    "<p>You requested a password reset for your Workout Planner account.</p>"
    '<p><a href="{url}" target="_blank" rel="noopener noreferrer">Click here to set a new password.</a></p>'
    "<p>If you did not make this request you can safely ignore this email.</p>"
)


@shared_task
def send_password_reset_email_task(user_id, reset_url):
    user = User.objects.get(id=user_id)
    if not user.email:
        return 0
    sent = send_mail(
        RESET_SUBJECT,
        RESET_TEXT.format(url=reset_url),
        settings.DEFAULT_FROM_EMAIL,
        [user.email],
        html_message=RESET_HTML.format(url=reset_url),
        fail_silently=True,
    )
    if not sent:
        logger.warning("Password reset email to user=%s was not delivered", user_id)
    return sent
