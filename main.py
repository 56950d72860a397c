"""Main entry point for the Challenge Sprint bot."""

import asyncio
import logging
import os

import config
from bot.client import create_bot
from bot.events import setup_events


async def main():
    """Main function to start the bot."""
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    
    # Create bot
    bot = create_bot()
    
    # Setup events
    setup_events(bot)
    
    # Load cogs
    await bot.load_extension('cogs.game_commands')
    await bot.load_extension('cogs.tournament_commands')
    
    # Get token
    token = os.getenv("DISCORD_TOKEN")
    if not token:
        print("ERROR: DISCORD_TOKEN not found in environment variables!")
        print("Please create a .env file with your Discord bot token.")
        return
    
    # Start bot
    print(f"Starting bot (tick every {config.TICK_SECONDS}s)...")
    async with bot:
        await bot.start(token)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nBot stopped by user.")
