# scripts/probe_bridge.py
import asyncio
import sys
from app.core.config import settings
from app.core.logging import setup_logging
from app.services.config_store import BridgeConfigStore
from app.services.sync_orchestrator import SyncOrchestrator

async def main(base_url: str = None) -> int:
    """Проверка relay так, как это делает витрина при старте"""
    setup_logging("WARNING")

    orchestrator = SyncOrchestrator(BridgeConfigStore(settings.BRIDGE_CONFIG_FILE))
    if base_url:
        orchestrator.set_base_url(base_url)

    print("=" * 50)
    print(f"Probing relay at {orchestrator.config.base_url}...")
    print("=" * 50)

    try:
        status = await orchestrator.startup()
    finally:
        await orchestrator.client.disconnect()

    print(f"Status: {status.value}")
    if orchestrator.error:
        print(f"  {orchestrator.error.title}: {orchestrator.error.message}")
    else:
        print(f"  Latency: {orchestrator.latency}")
        print(f"  Products: {len(orchestrator.products)}")
        print(f"  Customers: {len(orchestrator.customers)}")

    print("\nQuery log:")
    for entry in orchestrator.logs():
        print(f"  [{entry.timestamp:%H:%M:%S}] {entry.type.value:<6} {entry.query}")

    return 0 if orchestrator.error is None else 1

if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None)))
