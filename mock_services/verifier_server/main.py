from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pathlib import Path
import json
import os

app = FastAPI(title="Mock Academic Verifier", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/verifier_stub") if os.path.exists("/verifier_stub") else Path(__file__).resolve().parents[2] / "verifier_stub"

@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/verifier/students/{borrower_ref}")
def get_student(borrower_ref: str):
    file = DATA_DIR / f"student_{borrower_ref}.json"
    if not file.exists():
        raise HTTPException(status_code=404, detail="student not found")
    return JSONResponse(content=json.loads(file.read_text()))
