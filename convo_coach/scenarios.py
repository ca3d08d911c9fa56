"""Built-in practice scenarios."""

from typing import Dict, List, Optional

from convo_coach.models import Scenario


SCENARIOS: List[Scenario] = [
    Scenario(
        id="small-talk",
        title="Small Talk with a Colleague",
        description="Practice casual workplace conversations and build rapport",
        initial_prompt="Hey! How's your week going so far?",
    ),
    Scenario(
        id="explaining-task",
        title="Explaining a Task",
        description="Learn to clearly communicate work instructions and requirements",
        initial_prompt="Could you walk me through what you're working on?",
    ),
    Scenario(
        id="responding-question",
        title="Responding to a Question",
        description="Practice giving clear, confident answers in professional settings",
        initial_prompt="I have a quick question about the project timeline. Do you have a moment?",
    ),
]

_BY_ID: Dict[str, Scenario] = {s.id: s for s in SCENARIOS}


def get_scenario(scenario_id: Optional[str]) -> Optional[Scenario]:
    """Look up a scenario by id, returning None when unknown."""
    if not scenario_id:
        return None
    return _BY_ID.get(scenario_id.strip().lower())
