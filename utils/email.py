# utils/email.py
from html import escape

import requests

from config import BREVO_API_KEY, MAIL_SENDER, FRONTEND_URL
from logging_config import logger

BREVO_URL = "https://api.brevo.com/v3/smtp/email"


def send_email(to_email: str, subject: str, html: str) -> bool:
     """
     Send one transactional email through Brevo.

     Never raises: callers treat email as best effort, so failures are logged
     and reported as False.
     """
     if not BREVO_API_KEY:
          logger.warning("BREVO_API_KEY is not set, skipping email to %s", to_email)
          return False

     try:
          response = requests.post(
               BREVO_URL,
               headers={
                    "api-key": BREVO_API_KEY,
                    "Content-Type": "application/json",
               },
               json={
                    "sender": {"name": "Renta", "email": MAIL_SENDER},
                    "to": [{"email": to_email}],
                    "subject": subject,
                    "htmlContent": html,
               },
               timeout=10,
          )
     except requests.RequestException as e:
          logger.error("Brevo request failed for %s: %s", to_email, e)
          return False

     if response.status_code not in (200, 201, 202):
          logger.error("Brevo error for %s: %s", to_email, response.text)
          return False
     return True


def send_manager_invitation(to_email: str, property_name: str, temp_password: str = None) -> bool:
     credentials = ""
     if temp_password:
          credentials = f"""
               <p>Your account has been created. Sign in with:</p>
               <p>Email: <b>{escape(to_email)}</b><br/>Temporary password: <b>{temp_password}</b></p>
          """
     return send_email(
          to_email,
          f"You've been invited to manage {property_name}",
          f"""
               <h2>Property manager invitation</h2>
               <p>You have been invited to manage <b>{escape(property_name)}</b> on Renta.</p>
               {credentials}
               <p><a href="{FRONTEND_URL}/manager">Open the manager portal</a> to accept.</p>
          """,
     )


def send_agent_welcome(to_email: str, temp_password: str) -> bool:
     return send_email(
          to_email,
          "Your Renta agent application was approved",
          f"""
               <h2>Welcome to Renta</h2>
               <p>Your agent account is ready.</p>
               <p>Email: <b>{escape(to_email)}</b><br/>Temporary password: <b>{temp_password}</b></p>
               <p>Please change your password after your first login.</p>
          """,
     )


def send_payment_reminder(to_email: str, tenant_name: str, message: str) -> bool:
     return send_email(
          to_email,
          "Rent payment reminder",
          f"""
               <h2>Hello {escape(tenant_name)},</h2>
               <p>{escape(message)}</p>
          """,
     )
