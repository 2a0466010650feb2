"""Entry point for chaosball package."""

import argparse
import asyncio
import logging

from rich.console import Console

from chaosball.config import get_settings


def _parse_bet(raw: str):
    """Parse TYPE:AMOUNT, e.g. HOME_WIN:100."""
    from chaosball.core.models import BetType

    bet_type, _, amount = raw.partition(":")
    try:
        return BetType(bet_type.upper()), float(amount)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected TYPE:AMOUNT, got {raw!r}")


async def run_demo(args, console: Console) -> None:
    """Set up a match, run a few plays and print the scoreboard after each."""
    from chaosball.api.services.match_service import build_orchestrator
    from chaosball.errors import BetRejected
    from chaosball.scoreboard import render_scoreboard

    settings = get_settings()
    if args.no_audio:
        settings.audio_enabled = False

    orchestrator = build_orchestrator(settings)

    def show() -> None:
        console.print(
            render_scoreboard(
                orchestrator.state,
                orchestrator.visual,
                orchestrator.bets,
                orchestrator.wallet,
            )
        )

    try:
        result = await orchestrator.initialize(args.theme)
        if not result.ok:
            console.print(f"[red]Match setup failed:[/red] {result.error or result.reason}")
            return
        show()

        for bet_type, amount in args.bet or []:
            try:
                bet = orchestrator.place_bet(bet_type, amount)
            except BetRejected as e:
                console.print(f"[yellow]Bet rejected:[/yellow] {e}")
                continue
            console.print(f"Placed {bet.type.value} {bet.amount:,.2f} @ {bet.odds:.2f}")

        for _ in range(args.plays):
            outcome = await orchestrator.advance_play()
            if not outcome.accepted:
                console.print(f"[yellow]Play skipped:[/yellow] {outcome.reason}")
                break
            if outcome.error is not None:
                console.print(f"[red]Play failed:[/red] {outcome.error}")
                continue
            if outcome.media_error is not None:
                console.print(f"[yellow]{outcome.media_error}[/yellow]")
            show()

        if args.replay:
            task = orchestrator.request_replay()
            if task is None:
                console.print("[yellow]Replay unavailable[/yellow]")
            else:
                with console.status("Rendering replay..."):
                    replay = await task
                if replay.ok:
                    console.print(f"Replay ready: {orchestrator.visual.url}")
                else:
                    console.print(f"[red]Replay failed:[/red] {replay.error or replay.reason}")
    finally:
        await orchestrator.close()


def main() -> None:
    """Main entry point for the ChaosBall application."""
    parser = argparse.ArgumentParser(
        description="ChaosBall - generated sports broadcast",
        prog="chaosball",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run a match in the terminal (no API server)",
    )
    parser.add_argument(
        "--theme",
        type=str,
        default=None,
        help="Theme for team/venue generation",
    )
    parser.add_argument(
        "--plays",
        type=int,
        default=5,
        help="Plays to run in demo mode (default: 5)",
    )
    parser.add_argument(
        "--bet",
        type=_parse_bet,
        action="append",
        help="Place a bet before the first play, e.g. HOME_WIN:100 (repeatable)",
    )
    parser.add_argument(
        "--replay",
        action="store_true",
        help="Request an instant replay after the last play",
    )
    parser.add_argument(
        "--no-audio",
        action="store_true",
        help="Skip commentary playback",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP API under uvicorn",
    )
    parser.add_argument("--host", type=str, default="127.0.0.1", help="API host")
    parser.add_argument("--port", type=int, default=8000, help="API port")

    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for error in settings.validate():
        logging.getLogger("chaosball").warning(error)

    if args.demo:
        console = Console()
        console.print("ChaosBall - Generated Sports Broadcast (Demo Mode)")
        console.print("=" * 50)
        asyncio.run(run_demo(args, console))
    elif args.serve:
        from chaosball.api.main import run_api

        run_api(host=args.host, port=args.port)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
