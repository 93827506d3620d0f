"""
WhatsApp Business Platform (Graph API) client.

The entry point is ``platform.whatsapp_platform.WhatsAppPlatform``.
"""
