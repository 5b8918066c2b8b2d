import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from scorebook import util
from scorebook.engine import ScoringEngine
from scorebook.score import scorecard


logging.basicConfig(level=logging.INFO)

app = FastAPI()


engine = None


class Command(BaseModel):
    event: str
    command_id: int
    body: dict = {}


def get_engine() -> ScoringEngine:
    global engine
    if engine is not None:
        return engine
    config = util.load_config()
    engine = ScoringEngine.from_config(config)
    return engine


def active_innings():
    innings = get_engine().match_innings.current
    if innings is None:
        raise HTTPException(status_code=404, detail="no innings in progress")
    return innings


@app.post("/command/")
def post_command(command: Command):
    scoring_engine = get_engine()
    resp = scoring_engine.on_command(command.model_dump())
    return resp


@app.get("/score/")
def get_score():
    active_innings()
    return get_engine().snapshot()


@app.get("/scorecard/")
def get_scorecard():
    return scorecard(active_innings())
