"""Example showing session injection and a custom polling policy."""

import asyncio

from aiohttp import ClientSession

from pytoon import Credentials, PollingPolicy, ToonClient


async def main() -> None:
    """Share an application-managed aiohttp session with the client."""
    credentials = Credentials(
        username="myEnecoUsername",
        password="myEnecoPassword",
        tenant_id="eneco",
        consumer_key="ToonAPIConsumerKey",
        consumer_secret="ToonAPIConsumerSecret",
    )

    async with ClientSession() as session:
        client = ToonClient(
            credentials,
            session=session,
            polling=PollingPolicy(max_attempts=10, delay=0.5, backoff_factor=1.5),
            refresh_enabled=True,
        )

        async with client:
            for agreement in await client.get_agreements():
                status = await client.get_status(agreement)
                print(f"{agreement.agreement_id}: {status.current_temperature} C")

        # Session remains open after client exits
        print(f"Session closed: {session.closed}")


if __name__ == "__main__":
    asyncio.run(main())
