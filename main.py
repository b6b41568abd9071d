from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from src.services.rgb_steganography.main import router as stego_router
from src.utility.constants_manager import ConstantsManager

constants = ConstantsManager()

# Configure logging
logging.basicConfig(level=constants.get_log_level())
logger = logging.getLogger(__name__)


app = FastAPI(title="Image Lab", version="1.0.0")

# Ensure output directories exist
os.makedirs(constants.get_output_dir(), exist_ok=True)
os.makedirs(constants.get_recovered_dir(), exist_ok=True)

app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.mount("/files", StaticFiles(directory=constants.get_output_dir()), name="stego")
app.mount("/recovered", StaticFiles(directory=constants.get_recovered_dir()), name="recovered")

app.include_router(stego_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
