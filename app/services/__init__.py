"""
                        Services Module

Contains the outbound side effects of the API.

Services:
    - notifications: SMS (Twilio) and email (SMTP / SendGrid) confirmations,
      with log-only senders when credentials are missing
"""
