import base64
import logging
import os
import smtplib
from email.mime.text import MIMEText

from ayu.config import settings

logger = logging.getLogger(__name__)

# Gmail API scope
SCOPES = ["https://www.googleapis.com/auth/gmail.send"]

PURPOSE_VERIFY = "verify"
PURPOSE_RESET = "reset"

SUBJECTS = {
    PURPOSE_VERIFY: "Verify your AyuVeda account",
    PURPOSE_RESET: "Reset your AyuVeda password",
}

INTROS = {
    PURPOSE_VERIFY: "Use the code below to verify your email and finish creating your <strong>AyuVeda</strong> account.",
    PURPOSE_RESET: "Use the code below to reset your <strong>AyuVeda</strong> password.",
}


# -----------------------------
#  HTML EMAIL TEMPLATE
# -----------------------------
OTP_TEMPLATE = """
<!DOCTYPE html>
<html>
  <body style="margin:0; padding:0; font-family:Arial, Helvetica, sans-serif; background:#f6faf5;">
    <table width="100%" cellpadding="0" cellspacing="0" style="background:#f6faf5; padding:40px 0;">
      <tr>
        <td align="center">
          <table width="420" cellpadding="0" cellspacing="0" style="background:#ffffff; border-radius:12px; padding:30px; border:1px solid #eef3ec;">
            <tr>
              <td align="center" style="font-size:22px; font-weight:bold; color:#166534;">
                Your AyuVeda code
              </td>
            </tr>
            <tr><td style="height:20px;"></td></tr>
            <tr>
              <td style="font-size:15px; color:#555; line-height:1.6;">
                Namaste,<br><br>
                {{INTRO}}
              </td>
            </tr>
            <tr><td style="height:30px;"></td></tr>
            <tr>
              <td align="center">
                <div style="font-size:32px; font-weight:bold; letter-spacing:6px; padding:16px 24px;
                            background:#3a7d44; color:white; border-radius:8px; display:inline-block;">
                  {{OTP}}
                </div>
              </td>
            </tr>
            <tr><td style="height:30px;"></td></tr>
            <tr>
              <td style="font-size:14px; color:#999; line-height:1.5;">
                This code is valid for {{MINUTES}} minutes.<br>
                If you didn't request this, you may ignore this email.
              </td>
            </tr>
          </table>
        </td>
      </tr>
    </table>
  </body>
</html>
"""


def render_otp_email(otp, purpose: str = PURPOSE_VERIFY) -> tuple[str, str]:
    html = (
        OTP_TEMPLATE.replace("{{INTRO}}", INTROS[purpose])
        .replace("{{OTP}}", str(otp))
        .replace("{{MINUTES}}", str(settings.OTP_EXPIRE_MINUTES))
    )
    return SUBJECTS[purpose], html


# -----------------------------
#  GMAIL API BACKEND
# -----------------------------
def get_gmail_service():
    from google.auth.transport.requests import Request
    from google.oauth2.credentials import Credentials
    from google_auth_oauthlib.flow import InstalledAppFlow
    from googleapiclient.discovery import build

    creds = None

    # Load saved Gmail token.json
    if os.path.exists(settings.GMAIL_TOKEN_PATH):
        creds = Credentials.from_authorized_user_file(settings.GMAIL_TOKEN_PATH, SCOPES)

    # No valid token? Run Google OAuth
    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            flow = InstalledAppFlow.from_client_secrets_file(settings.GMAIL_CREDENTIALS_PATH, SCOPES)
            creds = flow.run_local_server(port=0)

        with open(settings.GMAIL_TOKEN_PATH, "w") as token:
            token.write(creds.to_json())

    return build("gmail", "v1", credentials=creds)


def _send_gmail(to_email: str, subject: str, html_message: str):
    service = get_gmail_service()

    msg = MIMEText(html_message, "html")
    msg["to"] = to_email
    msg["subject"] = subject

    encoded_msg = base64.urlsafe_b64encode(msg.as_bytes()).decode()
    result = (
        service.users()
        .messages()
        .send(userId="me", body={"raw": encoded_msg})
        .execute()
    )
    logger.info("Gmail message sent to %s id=%s", to_email, result.get("id"))
    return result


# -----------------------------
#  SMTP BACKEND
# -----------------------------
def _send_smtp(to_email: str, subject: str, html_message: str):
    msg = MIMEText(html_message, "html")
    msg["Subject"] = subject
    msg["From"] = settings.FROM_EMAIL
    msg["To"] = to_email

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        server.starttls()
        if settings.SMTP_USER:
            server.login(settings.SMTP_USER, settings.SMTP_PASS)
        server.send_message(msg)
    logger.info("SMTP message sent to %s", to_email)


def send_email(to_email: str, subject: str, html_message: str):
    backend = settings.EMAIL_BACKEND
    if backend == "gmail":
        return _send_gmail(to_email, subject, html_message)
    if backend == "smtp":
        return _send_smtp(to_email, subject, html_message)
    if backend == "console":
        logger.info("Email to %s (%s) not sent; console backend active", to_email, subject)
        return None
    raise ValueError(f"Unknown EMAIL_BACKEND: {backend}")


def send_email_otp(to_email: str, otp, purpose: str = PURPOSE_VERIFY):
    subject, html = render_otp_email(otp, purpose)
    if settings.EMAIL_BACKEND == "console":
        # local development only; real backends never log the code
        print(f"[DEV MODE] {purpose} OTP for {to_email}: {otp}")
    return send_email(to_email, subject, html)
