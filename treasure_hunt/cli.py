#!/usr/bin/env python
# Console entry point: seed the catalog, browse it and go treasure hunting
import asyncio
import argparse
import logging
import random
import signal
import sys
from typing import Optional

from treasure_hunt.config import Settings, get_settings
from treasure_hunt.database import create_db_engine, create_session_factory, init_db
from treasure_hunt.database_seeder import seed_database
from treasure_hunt.game.session import TreasureHuntSession
from treasure_hunt.game.simulation import ConsoleNotifier, ConsoleRenderer, SimulatedTracker
from treasure_hunt.models.enums import SelectionMode, SessionState
from treasure_hunt.preferences import Preferences
from treasure_hunt.services.progress_service import ProgressService
from treasure_hunt.services.selection_service import build_selection_policy
from treasure_hunt.ui.console import (
    console, show_title, show_error, show_warning, show_info, confirm_action,
    display_catalog_progress, display_treasure_list
)

logger = logging.getLogger("treasure_hunt")

NO_SCOPE_MESSAGE = "Open the collection book and choose an area to explore first (treasure-hunt browse <area id>)."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Treasure Hunt')
    parser.add_argument('--database-url', help='Database URL')
    parser.add_argument('--preferences', help='Preferences file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output')

    sub = parser.add_subparsers(dest='command', required=True)

    seed = sub.add_parser('seed', help='Import the bundled catalog (first run only)')
    seed.add_argument('--file', help='Seed document to import instead of the bundled one')
    seed.add_argument('--force', action='store_true', help='Import even if already initialized')

    sub.add_parser('progress', help='Show the collection book')

    browse = sub.add_parser('browse', help='List the treasures of an area and make it the hunting scope')
    browse.add_argument('sub_zone_id', type=int)

    hunt = sub.add_parser('hunt', help='Start a treasure hunt session')
    hunt.add_argument('--mode', choices=[m.value for m in SelectionMode], default=SelectionMode.SCOPED.value)
    hunt.add_argument('--name', help='Treasure name for by_name mode')
    hunt.add_argument('--seed', type=int, help='Random seed for the simulated tracker and placement')

    return parser


def open_store(settings: Settings):
    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)
    return create_session_factory(engine)


def cmd_seed(args, settings: Settings, session_factory, preferences: Preferences) -> int:
    imported = seed_database(session_factory, preferences, args.file or settings.SEED_DATA_PATH, force=args.force)
    if imported:
        console.print("[green]Catalog imported.[/green]")
    elif preferences.initialized:
        show_info("Catalog already initialized. Use --force to import again.")
    else:
        show_error("Catalog import failed, see the log for details.")
        return 1
    return 0


def cmd_progress(args, settings: Settings, session_factory, preferences: Preferences) -> int:
    db = session_factory()
    try:
        display_catalog_progress(ProgressService(db).get_catalog_progress())
    finally:
        db.close()
    return 0


def cmd_browse(args, settings: Settings, session_factory, preferences: Preferences) -> int:
    db = session_factory()
    try:
        listing = ProgressService(db).get_treasure_list(args.sub_zone_id)
    finally:
        db.close()

    if listing is None:
        show_error(f"Area {args.sub_zone_id} not found")
        return 1

    display_treasure_list(listing)
    preferences.set_last_sub_zone(args.sub_zone_id)
    return 0


async def play(session: TreasureHuntSession) -> SessionState:
    """Drive one session, asking the player to tap the chest once it appears"""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, session.cancel)
        except NotImplementedError:
            pass

    try:
        await session.run()
    except asyncio.CancelledError:
        show_warning("Treasure hunt cancelled.")
        return session.state
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.remove_signal_handler(sig)
            except NotImplementedError:
                pass

    if session.state != SessionState.SPAWNED:
        return session.state

    handle = session.record.handle
    tapped = await asyncio.to_thread(confirm_action, "Tap the treasure chest?", True)
    if not tapped:
        session.cancel()
        return session.state

    session.on_interaction(handle)
    await session.wait_collected()

    if session.state == SessionState.COLLECTED:
        await asyncio.to_thread(confirm_action, "Add it to your collection book?", True)
        session.acknowledge()
    return session.state


def cmd_hunt(args, settings: Settings, session_factory, preferences: Preferences) -> int:
    mode = SelectionMode(args.mode)
    if mode == SelectionMode.SCOPED and preferences.last_sub_zone_id is None:
        show_warning(NO_SCOPE_MESSAGE)
        return 1

    try:
        policy = build_selection_policy(
            mode,
            name=args.name,
            sub_zone_id=preferences.last_sub_zone_id,
            fallback_to_global=settings.SCOPED_FALLBACK_TO_GLOBAL,
        )
    except ValueError as e:
        show_error(str(e))
        return 2

    rng = random.Random(args.seed)
    session = TreasureHuntSession.from_settings(
        session_factory,
        policy,
        tracker=SimulatedTracker.random(rng),
        renderer=ConsoleRenderer(),
        notifier=ConsoleNotifier(),
        settings=settings,
        rng=rng,
    )

    show_title("TREASURE HUNT", f"Looking for treasure ({mode.value})")
    final_state = asyncio.run(play(session))

    logger.info(f"Session ended in state {final_state.value}")
    return 0 if final_state in (SessionState.DONE, SessionState.COLLECTED) else 1


COMMANDS = {
    'seed': cmd_seed,
    'progress': cmd_progress,
    'browse': cmd_browse,
    'hunt': cmd_hunt,
}


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.database_url:
        settings = settings.model_copy(update={"DATABASE_URL": args.database_url})
    if args.preferences:
        settings = settings.model_copy(update={"PREFERENCES_PATH": args.preferences})

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    preferences = Preferences(settings.PREFERENCES_PATH)
    session_factory = open_store(settings)

    # First run imports the bundled catalog
    if args.command != 'seed':
        seed_database(session_factory, preferences, settings.SEED_DATA_PATH)

    return COMMANDS[args.command](args, settings, session_factory, preferences)


if __name__ == "__main__":
    sys.exit(main())
