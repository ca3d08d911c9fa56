"""Command-line entry point: run the service or practice in the terminal."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from convo_coach.config import Config
from convo_coach.models import score_band
from convo_coach.scenarios import SCENARIOS, get_scenario
from convo_coach.session import Notice, SessionController


def serve(host: str, port: int) -> None:
    import uvicorn
    uvicorn.run("convo_coach.main:app", host=host, port=port, log_level="info")


def _print_notice(notice: Notice) -> None:
    print(f"! {notice.message}")


def _print_feedback(controller: SessionController) -> None:
    fb = controller.feedback
    if fb is None:
        return
    print(f"\n  Score: {fb.score}% ({score_band(fb.score)})")
    if fb.transcript:
        print(f"  Transcript: {fb.transcript}")
    print(f"  Tip: {fb.tip}")
    print(f"  Sample reply: \"{fb.sample_reply}\"\n")


def _make_recorder():
    from convo_coach.recorder import MicrophoneRecorder

    live = None
    if Config.DEEPGRAM_API_KEY:
        from convo_coach.live_transcriber import DeepgramLiveTranscriber
        live = DeepgramLiveTranscriber()
    return MicrophoneRecorder(
        live_transcriber=live,
        on_live_text=lambda text: print(f"\r  ... {text}", end="", flush=True),
    )


def practice(scenario_id: Optional[str], service_url: Optional[str]) -> int:
    from convo_coach.client import PracticeClient

    scenario = get_scenario(scenario_id)
    if scenario is None:
        print("Choose a scenario:")
        for s in SCENARIOS:
            print(f"  {s.id:<22} {s.title} - {s.description}")
        return 2

    controller = SessionController(
        scenario,
        PracticeClient(service_url),
        on_celebrate=lambda fb: print(f"*** New best: {fb.score}%! ***"),
        on_notice=_print_notice,
    )
    print(f"{scenario.title}  (/speak, /type, /retry, /quit)\n")
    print(f"Coach: {controller.messages[-1].content}")

    recorder = None
    while True:
        try:
            line = input("You: ")
        except EOFError:
            break
        command = line.strip().lower()

        if command == "/quit":
            break
        if command in ("/type", "/speak"):
            controller.set_input_mode(command[1:])
            continue
        if command == "/retry":
            controller.retry_last_turn()
            prompts = [m.content for m in controller.messages if m.role == "assistant"]
            print(f"Coach: {prompts[-1] if prompts else scenario.initial_prompt}")
            continue

        if controller.session.input_mode == "speak":
            recorder = recorder or _make_recorder()
            print("Recording... press Enter to stop")
            result = controller.record_turn(recorder, input)
            print()
        else:
            result = controller.submit_turn(line)

        if result is not None:
            _print_feedback(controller)
            print(f"Coach: {result.next_prompt}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="convo-coach", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    serve_p = sub.add_parser("serve", help="Run the evaluation service")
    serve_p.add_argument("--host", default=Config.HOST)
    serve_p.add_argument("--port", type=int, default=Config.PORT)

    practice_p = sub.add_parser("practice", help="Practice a scenario in the terminal")
    practice_p.add_argument("--scenario", help="Scenario id (omit to list them)")
    practice_p.add_argument("--url", help="Evaluation service base URL")

    args = parser.parse_args(argv)
    if args.command == "serve":
        serve(args.host, args.port)
        return 0
    return practice(args.scenario, args.url)


if __name__ == "__main__":
    raise SystemExit(main())
