from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel
from typing import List, Optional
import json

app = FastAPI(title="Stub OpenRouter Server", version="1.0.0")

HEALTH_ANSWER = {
    "score": 72,
    "status": "Good",
    "insights": [
        "Automate a transfer to savings on payday.",
        "Your largest category deserves a monthly limit.",
        "Keep three months of expenses in an emergency fund.",
    ],
}


class Message(BaseModel):
    role: str
    content: str


class CompletionRequest(BaseModel):
    model: str
    messages: List[Message]


def completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@app.get("/health")
def health(): return {"status": "ok"}


@app.post("/api/v1/chat/completions")
def chat_completions(body: CompletionRequest, authorization: Optional[str] = Header(None)):
    if not authorization or not authorization.startswith("Bearer sk-or-"):
        raise HTTPException(status_code=401, detail="invalid api key")

    # The health prompt asks for raw JSON; wrap it in a fence like real models often do
    if any("JSON generator" in m.content for m in body.messages if m.role == "system"):
        return completion(f"```json\n{json.dumps(HEALTH_ANSWER)}\n```")

    question = body.messages[-1].content if body.messages else ""
    return completion(f"(stub {body.model}) You asked: {question}")
