"""
Test WhatsApp Provider Integration

Run this script to verify the messaging provider is configured
correctly and can send messages.

Usage: python scripts/send_test_message.py
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from app.core.config import settings, missing_provider_settings
from app.core.exceptions import ConfigurationError
from app.services.messaging_providers import build_provider_client
from app.services.whatsapp_service import MessagingGateway
from utils.validation_utils import normalize_phone_number


def test_provider_config() -> bool:
    """Check that the selected provider has all credentials"""
    print("=" * 60)
    print("  Messaging Configuration Test")
    print("=" * 60 + "\n")

    print(f"Provider: {settings.MESSAGING_PROVIDER}")
    print(f"Dry cleaner number: {'✅ Set' if settings.DRY_CLEANER_WHATSAPP_NUMBER else '❌ Not set'}")

    missing = missing_provider_settings(settings)
    if missing:
        print(f"\n❌ Missing: {', '.join(missing)}")
        print("⚠️  Please update your .env file")
        return False

    print("\nConfiguration valid: ✅ Yes\n")
    return True


async def test_send_message():
    """Send one test message"""
    print("=" * 60)
    print("  Test Message Sending")
    print("=" * 60 + "\n")

    phone = input("Enter a WhatsApp number (e.g., 0792875310 or +250792875310): ")
    normalized = normalize_phone_number(phone, settings.DEFAULT_COUNTRY_CODE)

    if normalized is None:
        print("❌ That does not look like a phone number")
        return

    try:
        gateway = MessagingGateway(build_provider_client(settings), timeout=settings.MESSAGING_TIMEOUT_SECONDS)
    except ConfigurationError as e:
        print(f"❌ {e.message}")
        return

    print(f"\n📤 Sending test message to {normalized}...")

    result = await gateway.send(
        normalized,
        f"🧪 *Test Message from {settings.BUSINESS_NAME}*\n\nIf you received this, WhatsApp delivery is working! ✅"
    )

    if result.success:
        print("\n✅ Message sent successfully!")
        print(f"Message ID: {result.message_id}")
        print("\n📱 Check your WhatsApp!")
    else:
        print("\n❌ Failed to send message")
        print(f"Error: {result.error}")


async def main():
    print(f"\n🧪 {settings.BUSINESS_NAME} WhatsApp Integration Test\n")

    if not test_provider_config():
        print("\n❌ Configuration test failed. Please fix .env file and try again.")
        return

    test_send = input("\nDo you want to send a test message? (y/n): ")

    if test_send.lower() == 'y':
        await test_send_message()
    else:
        print("\n✅ Configuration test passed!")

    print("\n" + "=" * 60 + "\n")


if __name__ == "__main__":
    asyncio.run(main())
