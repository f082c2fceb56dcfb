"""
Run the iRequest server with uvicorn.

Usage:
    python run.py
    python run.py --reload    # Development mode with auto-reload
    python run.py --port 8080 # Custom port
    python run.py --seed      # Create tables and reference data first
"""
import argparse
import uvicorn

from irequest.config.settings import settings


def seed() -> None:
    from scripts.seed_data import main as seed_main
    seed_main()


def main():
    parser = argparse.ArgumentParser(description="Run the iRequest server")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=3000, help="Port to bind to (default: 3000)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (default: 1, ignored if --reload is set)"
    )
    parser.add_argument("--seed", action="store_true", help="Seed the database before starting")

    args = parser.parse_args()

    if args.seed:
        seed()

    print("Starting iRequest server...")
    print(f"  Environment: {settings.environment}")
    print(f"  Database: {settings.database_url.split('@')[-1]}")
    print(f"  Listening: http://{args.host}:{args.port}")
    if not args.reload and args.workers > 1:
        print(f"  Workers: {args.workers}")
    print()

    uvicorn.run(
        "irequest.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=1 if args.reload else args.workers,
        log_config=None,  # keep the JSON handlers installed by setup_logging
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
