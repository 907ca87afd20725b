"""Basic usage example for pytoon library."""

import asyncio
from datetime import UTC, datetime, timedelta

from pytoon import Credentials, ToonClient


async def main() -> None:
    """Demonstrate basic usage of pytoon."""
    credentials = Credentials(
        username="myEnecoUsername",
        password="myEnecoPassword",
        tenant_id="eneco",
        consumer_key="ToonAPIConsumerKey",
        consumer_secret="ToonAPIConsumerSecret",
    )

    async with ToonClient(credentials) as client:
        agreements = await client.get_agreements()
        print(f"Found {len(agreements)} display(s)")

        for agreement in agreements:
            print(f"\nDisplay: {agreement.display_common_name}")
            print(f"  Agreement: {agreement.agreement_id}")
            print(f"  Firmware: {agreement.display_software_version}")

            # Bound the status polling with an outer timeout
            status = await asyncio.wait_for(client.get_status(agreement), timeout=60)
            print(f"  Temperature: {status.current_temperature} C")
            print(f"  Setpoint: {status.current_setpoint} C")
            if status.power_usage is not None:
                print(f"  Power: {status.power_usage.value} W")

            now = datetime.now(UTC)
            flow = await client.get_gas_flow(agreement, now - timedelta(days=1), now)
            for point in flow.hours:
                print(f"  {point.timestamp:%Y-%m-%d %H:%M} {point.value} {point.unit}")


if __name__ == "__main__":
    asyncio.run(main())
