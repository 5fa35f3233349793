"""
Contact Relay App

Lets authenticated users send a message to another user through the
personal contact form:
- Validation of recipient, subject and message
- Recipient opt-in check
- Message storage and email delivery (with optional copy to the sender)
- Staff listing of stored messages
"""
