"""
Entry point: `python -m stroop` or `stroop-task` script.
Wires all modules together: builds a session timeline, writes it to a run
directory and, with --simulate, drives it with a simulated participant.
"""
from __future__ import annotations

import argparse

from stroop import config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stroop-task",
        description="Build (and optionally simulate) a Stroop color-word session.",
    )
    parser.add_argument("--participant-id", default="", help="blank: generate XXXX-XXXX-XXXX-XXXX")
    parser.add_argument("--seed", type=int, default=None, help="seed for shuffling, fixation and simulated responses")
    parser.add_argument("--data-dir", default="data", help="parent directory for run output")
    parser.add_argument("--practice-trials", type=int, default=config.DEFAULT_PRACTICE_TRIALS_PER_CONDITION,
                        help="practice trials per condition")
    parser.add_argument("--main-trials", type=int, default=config.DEFAULT_MAIN_TRIALS_PER_CONDITION,
                        help="main trials per condition")
    parser.add_argument("--trial-timeout-ms", type=int, default=config.DEFAULT_TRIAL_TIMEOUT_MS)
    parser.add_argument("--fixation-min-ms", type=int, default=config.DEFAULT_FIXATION_MIN_MS)
    parser.add_argument("--fixation-max-ms", type=int, default=config.DEFAULT_FIXATION_MAX_MS)
    parser.add_argument("--no-feedback", action="store_true", help="skip practice feedback screens")
    parser.add_argument("--no-fixation", action="store_true", help="skip fixation crosses")
    parser.add_argument("--no-instructions", action="store_true")
    parser.add_argument("--no-results", action="store_true")
    parser.add_argument("--simulate", action="store_true",
                        help="run the timeline with a simulated participant and record results")
    parser.add_argument("--summarize", metavar="RESULTS_CSV", default=None,
                        help="print the summary of an existing results CSV and exit")
    return parser


def _summary_table(summary):
    import rich.box
    from rich.table import Table

    table = Table(box=rich.box.SIMPLE_HEAD)
    table.add_column("Condition")
    table.add_column("Trials", justify="right")
    table.add_column("Correct", justify="right")
    table.add_column("Acc", justify="right")
    table.add_column("Mean RT", justify="right")
    for name, cond in (("congruent", summary.congruent), ("incongruent", summary.incongruent)):
        table.add_row(
            name, str(cond.n_trials), str(cond.n_correct),
            f"{cond.accuracy_pct}%", f"{cond.mean_rt_ms} ms",
        )
    return table


def run(argv: list[str] | None = None) -> None:
    import logging

    from rich.console import Console
    from rich.logging import RichHandler

    parser = build_parser()
    args = parser.parse_args(argv)

    rcon = Console(stderr=True)
    root_log = logging.getLogger("stroop")
    root_log.setLevel(logging.INFO)
    console_handler = RichHandler(console=rcon, show_path=False)
    console_handler.setLevel(logging.WARNING)  # rich tables handle terminal output
    root_log.addHandler(console_handler)

    try:
        _run(args, parser, rcon, root_log)
    finally:
        for handler in list(root_log.handlers):
            root_log.removeHandler(handler)
            handler.close()


def _run(args: argparse.Namespace, parser: argparse.ArgumentParser, rcon, root_log) -> None:
    import logging
    from datetime import datetime
    from pathlib import Path

    import numpy as np

    from stroop import recorder, scoring, session, simulate, timeline

    log = logging.getLogger("stroop.main")

    # ── SUMMARIZE EXISTING RESULTS ───────────────────────────────────────────
    if args.summarize:
        try:
            results = recorder.load_results(Path(args.summarize))
        except (FileNotFoundError, ValueError) as exc:
            parser.error(str(exc))
        summary = scoring.summarize(results)
        if not summary:
            rcon.print(f"[yellow]{summary.message}[/yellow]")
            return
        rcon.print(_summary_table(summary))
        rcon.print(f"[bold]Stroop effect:[/bold] [cyan]{summary.stroop_effect_ms} ms[/cyan]")
        return

    # ── INITIALISE SESSION ───────────────────────────────────────────────────
    try:
        options = session.TimelineOptions(
            practice_trials_per_condition=args.practice_trials,
            main_trials_per_condition=args.main_trials,
            trial_timeout_ms=args.trial_timeout_ms,
            fixation_min_ms=args.fixation_min_ms,
            fixation_max_ms=args.fixation_max_ms,
            show_practice_feedback=not args.no_feedback,
            include_fixation=not args.no_fixation,
            show_instructions=not args.no_instructions,
            show_results=not args.no_results,
        )
        rng = np.random.default_rng(args.seed)
        # IDs draw from their own generator so the seeded stream only feeds the timeline
        participant_id = session.resolve_participant_id(args.participant_id, np.random.default_rng())
    except ValueError as exc:
        parser.error(str(exc))

    session_time = datetime.now()

    # ── LOGGING ──────────────────────────────────────────────────────────────
    run_dir = session.make_run_dir(Path(args.data_dir), participant_id, session_time)
    file_handler = logging.FileHandler(run_dir / "experiment.log")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter("%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s"))
    root_log.addHandler(file_handler)

    rcon.print(
        f"[bold]Session:[/bold] participant=[cyan]{participant_id}[/cyan]  "
        f"seed=[cyan]{args.seed}[/cyan]  run_dir=[cyan]{run_dir}[/cyan]"
    )
    log.info("Session: participant=%s  seed=%s", participant_id, args.seed)
    log.info("Options: %s", options.as_dict())

    # ── BUILD TIMELINE ───────────────────────────────────────────────────────
    state = session.SessionState()
    tl = timeline.build_timeline(options, state=state, rng=rng)
    n_congruent = sum(s.congruent for s in tl.main_stimuli)
    rcon.print(
        f"[bold]Timeline:[/bold] {len(tl)} steps  "
        f"practice=[cyan]{len(tl.practice_stimuli)}[/cyan]  "
        f"main=[cyan]{state.total_trials}[/cyan] "
        f"({n_congruent} congruent / {state.total_trials - n_congruent} incongruent)"
    )

    # ── SETUP OUTPUT FILES ───────────────────────────────────────────────────
    recorder.write_sequence(run_dir / f"sequence_{participant_id}.csv", tl.sequence_rows())
    recorder.write_manifest(
        run_dir=run_dir,
        participant_id=participant_id,
        session_time=session_time,
        options=options,
        seed=args.seed,
        n_steps=len(tl),
        total_trials=state.total_trials,
    )

    if not args.simulate:
        return

    # ── SIMULATED SESSION ────────────────────────────────────────────────────
    participant = simulate.SimulatedParticipant(rng=rng)
    results = simulate.run_simulated_session(tl, participant)

    with recorder.ResultsCsvWriter(run_dir / f"results_{participant_id}.csv", participant_id) as writer:
        for result in results:
            writer.append(result)

    summary = tl.summary()
    recorder.write_summary(run_dir, participant_id, summary)
    if not summary:
        rcon.print(f"[yellow]{summary.message}[/yellow]")
        log.warning("No response trials recorded")
        return

    rcon.print(_summary_table(summary))
    rcon.print(
        f"\n[bold]Run complete:[/bold] {state.main_trials_completed}/{state.total_trials} main trials  "
        f"Stroop effect: [bold cyan]{summary.stroop_effect_ms} ms[/bold cyan]"
    )
    log.info(
        "Run complete: %d/%d main trials  stroop_effect=%d ms",
        state.main_trials_completed, state.total_trials, summary.stroop_effect_ms,
    )


if __name__ == "__main__":
    run()
