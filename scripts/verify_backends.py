"""
Check that both catalog backends answer: the primary document database and
the REST fallback service.
"""
import asyncio
import sys

import httpx
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError, OperationFailure

from agroguard.config import init_settings


async def verify_primary(settings) -> bool:
    if not settings.MONGODB_URI:
        print("⚠️  MONGODB_URI not configured, skipping the primary database")
        return True

    print(f"\n⏳ Pinging MongoDB database '{settings.MONGODB_DB}'...")
    client = AsyncMongoClient(settings.MONGODB_URI, serverSelectionTimeoutMS=7000)
    try:
        await client.admin.command("ping")
        print("✅ Primary database reachable")
        names = await client[settings.MONGODB_DB].list_collection_names()
        print(f"   Collections: {', '.join(sorted(names)) or '(none)'}")
        return True
    except OperationFailure as e:
        print(f"🔒 Primary database denied access (code {e.code}); clients will use the REST fallback")
        return True
    except PyMongoError as e:
        print(f"❌ Primary database unreachable: {e}")
        return False
    finally:
        await client.close()


async def verify_fallback(settings) -> bool:
    print(f"\n⏳ Checking REST fallback at {settings.FALLBACK_API_URL}...")
    try:
        async with httpx.AsyncClient(base_url=settings.FALLBACK_API_URL, timeout=settings.FALLBACK_API_TIMEOUT) as client:
            resp = await client.get("/health")
    except httpx.HTTPError as e:
        print(f"❌ REST fallback unreachable: {e}")
        return False

    if resp.status_code != 200:
        print(f"❌ REST fallback answered {resp.status_code}")
        return False

    body = resp.json()
    print(f"✅ REST fallback healthy ({body.get('environment')})")
    print(f"   Remote analysis: {'ON' if body.get('remoteAnalysis') else 'OFF'}")
    return True


async def main():
    print("🔄 Loading settings...")
    settings = init_settings()

    primary_ok = await verify_primary(settings)
    fallback_ok = await verify_fallback(settings)
    if not (primary_ok and fallback_ok):
        sys.exit(1)
    print("\n🎉 All backends verified")


if __name__ == "__main__":
    asyncio.run(main())
