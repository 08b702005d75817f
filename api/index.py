"""
payrelay - Main FastAPI Application

Single entry point for order creation, payment verification and the Razorpay
webhook. Serverless platforms import ``app`` from here; locally run
``python -m api.index`` or ``uvicorn api.index:app``.
"""
import os

from dotenv import load_dotenv

# .env must be loaded before Settings.from_env() runs
load_dotenv()

from payrelay.app import create_app  # noqa: E402

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.index:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3000")),
    )
