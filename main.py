import asyncio
import logging

from core.initialization import initialize_components, load_configuration
from notifiers.hub import NotifierHub
from utils.logger import setup_logger

STATUS_EVERY = 60  # seconds


async def run_bot() -> None:
    """
    Entrypoint coroutine for the paper-trading bot.

    Loads the configuration, configures root logging, wires the engine
    and its notifiers, then keeps trading until cancelled. A status line is
    logged every minute. On exit pending resolutions are cancelled; open
    trades stay in the journal and are rescheduled on the next start.
    """
    # Load environment configuration (.env)
    config = load_configuration()

    # Root handlers (rotating file + console) so every module logger is captured.
    setup_logger("", to_console=True)
    logger = logging.getLogger("PaperBot")

    components = initialize_components(config, logger=logger)
    engine = components["engine"]

    hub = NotifierHub(config)
    hub.attach(components["bus"])

    await engine.initialize()
    engine.start()
    try:
        while True:
            await asyncio.sleep(STATUS_EVERY)
            logger.info("📊 %s", engine.status())
    except asyncio.CancelledError:
        logger.info("Bot cancelled – shutting down")
    finally:
        await engine.shutdown(wait=False)
        if components["persistence"] is not None:
            components["persistence"].close()


def main():
    try:
        asyncio.run(run_bot())
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"❌ Bot terminated due to error: {e}")


if __name__ == "__main__":
    main()
