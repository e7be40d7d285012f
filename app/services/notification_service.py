import smtplib
import ssl
from email.message import EmailMessage

import requests
from flask import current_app


class NotificationService:
    """
    Sends booking notifications through the backend named by NOTIFIER.
    Returns True on success, False on failure. Failures are logged, never raised.
    """

    @staticmethod
    def notify(recipient: str, subject: str, body: str) -> bool:
        backend = current_app.config.get('NOTIFIER', 'log')
        senders = {
            'log': NotificationService._send_log,
            'smtp': NotificationService._send_smtp,
            'webhook': NotificationService._send_webhook,
        }
        sender = senders.get(backend)
        if sender is None:
            current_app.logger.error(f"Unknown notifier backend '{backend}'")
            return False

        try:
            sender(recipient, subject, body)
            return True
        except Exception as e:
            current_app.logger.error(f"Notification to {recipient} failed ({backend}): {e}")
            return False

    @staticmethod
    def _send_log(recipient, subject, body):
        current_app.logger.info(f"[notify] to={recipient} subject={subject!r} body={body!r}")

    @staticmethod
    def _send_smtp(recipient, subject, body):
        config = current_app.config
        host, port = config['SMTP_HOST'], config['SMTP_PORT']
        if not host:
            raise RuntimeError("SMTP_HOST is not configured")

        msg = EmailMessage()
        msg['Subject'] = subject
        msg['From'] = config['SMTP_FROM']
        msg['To'] = recipient
        msg.set_content(body)

        if port == 465:
            with smtplib.SMTP_SSL(host, port, context=ssl.create_default_context()) as server:
                if config['SMTP_USER']:
                    server.login(config['SMTP_USER'], config['SMTP_PASSWORD'])
                server.send_message(msg)
        else:
            with smtplib.SMTP(host, port) as server:
                server.starttls(context=ssl.create_default_context())
                if config['SMTP_USER']:
                    server.login(config['SMTP_USER'], config['SMTP_PASSWORD'])
                server.send_message(msg)

    @staticmethod
    def _send_webhook(recipient, subject, body):
        url = current_app.config['NOTIFY_WEBHOOK_URL']
        if not url:
            raise RuntimeError("NOTIFY_WEBHOOK_URL is not configured")

        response = requests.post(
            url,
            json={'to': recipient, 'subject': subject, 'body': body},
            timeout=current_app.config.get('NOTIFY_TIMEOUT', 10)
        )
        response.raise_for_status()
