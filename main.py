"""
Main entrypoint for the sketchpad CLI.
"""
import sys
from config import CANVAS_WIDTH, CANVAS_HEIGHT, HISTORY_CAPACITY, FRAME_CAPACITY
from surface.raster_surface import RasterSurface
from session import AnimationSession
from ui.cli import CLIInterface
from utils.logger import setup_logger

# Setup logging
logger = setup_logger()


def main():
    """Main entry point."""
    logger.info("=" * 60)
    logger.info("Sketchpad Starting")
    logger.info(f"Canvas: {CANVAS_WIDTH}x{CANVAS_HEIGHT}")
    logger.info(f"History capacity: {HISTORY_CAPACITY}, frame capacity: {FRAME_CAPACITY}")
    logger.info("=" * 60)

    try:
        surface = RasterSurface()
        session = AnimationSession(surface)
        logger.info("Session initialized")

        cli = CLIInterface()

        session.run_interactive_loop(
            input_handler=cli.get_input,
            output_handler=cli.display,
            command_handler=cli.handle_command
        )

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("\n\nInterrupted. Goodbye!")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        print(f"\nFATAL ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
