from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from property_agent import PropertyChatAgent, SearchFilter
from property_agent.catalog import filter_properties
from property_agent.utils import serialize_property


class HistoryItem(BaseModel):
    sender: str = "user"
    text: str = ""


class ChatRequest(BaseModel):
    message: Optional[str] = None
    history: List[HistoryItem] = Field(default_factory=list)
    sessionId: Optional[str] = None


def create_app(agent: Optional[PropertyChatAgent] = None) -> FastAPI:
    agent = agent or PropertyChatAgent.from_config()
    app = FastAPI(title="Property Agent API")

    # Enable CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify the exact origin
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.agent = agent

    @app.post("/api/chat")
    async def chat_endpoint(request: ChatRequest):
        if not request.message or not request.message.strip():
            raise HTTPException(status_code=400, detail="Message is required")
        reply = await agent.chat_payload(
            request.message,
            history=[item.model_dump() for item in request.history],
            session_id=request.sessionId,
        )
        return {
            "message": reply.message,
            "filters": reply.filters.to_dict(),
            "properties": [serialize_property(p) for p in reply.properties],
            "aiEnabled": reply.ai_enabled,
        }

    @app.get("/api/properties")
    async def list_properties(
        location: Optional[str] = None,
        minPrice: Optional[int] = Query(default=None, ge=0),
        maxPrice: Optional[int] = Query(default=None, ge=0),
        bedrooms: Optional[int] = Query(default=None, ge=0),
        q: Optional[str] = None,
    ):
        filters = SearchFilter(location=location, min_price=minPrice, max_price=maxPrice, bedrooms=bedrooms)
        results = agent.catalog.search_text(q) if q else agent.catalog.get_all()
        # Explicit query params narrow the text search further.
        results = filter_properties(results, filters)
        return [serialize_property(p) for p in results]

    @app.get("/")
    async def root():
        return {"status": "Property Agent API is running", "docs": "/docs"}

    @app.get("/api/health")
    async def health_check():
        return {
            "status": "ok",
            "ai": "enabled" if agent.ai_enabled else "disabled",
            "properties": len(agent.catalog),
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5001)
