"""FastAPI backend for the conversation practice coach."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import List, Literal
import traceback

from convo_coach.coach import evaluate_turn, history_from_payload
from convo_coach.config import Config
from convo_coach.errors import PracticeError
from convo_coach.scenarios import SCENARIOS

app = FastAPI(title="Conversation Practice Coach")

# Browser front ends call from other origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# Outbound HTTP transport override (None = real network)
app.state.transport = None


# Request models
class MessageModel(BaseModel):
    role: Literal["assistant", "user"]
    content: str


class EvaluationRequest(BaseModel):
    scenario: str
    userResponse: str
    isAudio: bool = False
    conversationHistory: List[MessageModel] = []


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same {error} shape as every other failure."""
    print(f"[EVAL] Invalid request payload: {exc.errors()}")
    return JSONResponse(status_code=500, content={"error": "Invalid request payload"})


@app.get("/health")
async def health():
    """Report readiness and missing settings."""
    missing = Config.validate()
    required_missing = [m for m in missing if "optional" not in m]
    return {
        "status": "degraded" if required_missing else "ok",
        "missing": missing,
    }


@app.get("/scenarios")
async def list_scenarios():
    """List the built-in practice scenarios."""
    return {"scenarios": [s.to_dict() for s in SCENARIOS]}


@app.post("/conversation-practice")
async def conversation_practice(body: EvaluationRequest, request: Request):
    """Evaluate one user turn and return feedback plus the next prompt."""
    print(f"[EVAL] Processing conversation practice: scenario={body.scenario!r} isAudio={body.isAudio}")

    try:
        result = await evaluate_turn(
            body.scenario,
            body.userResponse,
            body.isAudio,
            history_from_payload(body.conversationHistory),
            transport=request.app.state.transport,
        )
    except PracticeError as e:
        print(f"[EVAL] Turn failed ({e.status_code}): {e.message}")
        return JSONResponse(status_code=e.status_code, content=e.to_dict())
    except Exception as e:
        print(f"[EVAL] Error in conversation-practice: {e}")
        traceback.print_exc()
        return JSONResponse(status_code=500, content={"error": str(e) or "Unknown error occurred"})

    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=Config.HOST, port=Config.PORT)
