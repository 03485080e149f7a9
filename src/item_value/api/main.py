from contextlib import asynccontextmanager
from typing import Any, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict
import logging

from ..config.log_setup import configure_logging
from ..errors import ConfigurationError, ItemValueError
from .state import state

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(state.settings.log_level)
    yield
    await state.close()


app = FastAPI(
    title="Item Value API",
    description="Values commerce event items against a document store",
    version="1.0.0",
    lifespan=lifespan,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ItemIn(BaseModel):
    """One event item. Fields left out of the body stay absent."""
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[str, int]] = None
    price: Any = None
    quantity: Any = None
    discount: Any = None


class ValueRequest(BaseModel):
    items: list[ItemIn] = []
    config: Optional[dict[str, Any]] = None


@app.get("/")
async def root():
    return {"status": "online", "message": "Item Value API Active"}


@app.post("/value")
async def value_items(req: ValueRequest):
    # exclude_unset keeps absent quantity/discount absent, so defaults apply
    raw_items = [item.model_dump(exclude_unset=True) for item in req.items]
    try:
        engine = state.engine_for(req.config)
        result = await engine.calculate(raw_items)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ItemValueError as e:
        logger.exception("Valuation failed")
        raise HTTPException(status_code=500, detail=str(e))
    return result.to_dict()


@app.get("/system/status")
async def get_status():
    settings = state.settings
    return {
        "engine_active": True,
        "collection_id": settings.collection_id,
        "value_calculation": settings.value_calculation.value,
        "fallback_value_if_not_found": settings.fallback_value_if_not_found.value,
        "store": type(state.store).name,
    }
