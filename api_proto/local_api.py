from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
import pandas as pd

from gridsolver import solve
from gridsolver.config import (
    API_MAX_BRUTE_FORCE_COMBINATIONS,
    DEFAULT_RULES,
    USE_BRUTE_FORCE_FALLBACK,
)
from gridsolver.logging_utils import get_logger

logger = get_logger()

app = FastAPI()


class SolveRequest(BaseModel):
    board: list[list[str]]  # 2D array of strings ("" / "." for blanks)
    rules: Optional[list[str]] = None
    num_states: Optional[int] = None
    brute_force: bool = USE_BRUTE_FORCE_FALLBACK


@app.post("/api/solve")
def api_solve(request: SolveRequest):
    """
    Solver API endpoint.
    Receives grid data (2D array), converts to DataFrame, and calls the solver.
    Contradictions are reported in the response body ("status" / "error").
    Plain def so that FastAPI runs the CPU-bound solve in its threadpool.
    """
    try:
        # 2D配列をDataFrameに変換
        df = pd.DataFrame(request.board)
        result = solve(
            df,
            rule_names=request.rules or DEFAULT_RULES,
            num_states=request.num_states,
            use_brute_force=request.brute_force,
            max_combinations=API_MAX_BRUTE_FORCE_COMBINATIONS,
        )
        return result
    except ValueError as e:
        # 盤面の形・文字・ルール名などの入力ミス
        logger.warning("Bad solve request: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
