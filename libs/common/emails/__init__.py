"""
ICF Log email package.

Modules:
- core: base ``send_email`` over the SMTP relay

Templates live in services/communications_service/templates/.
"""
