import argparse
import os
import threading
import webbrowser

import uvicorn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Quiz Trainer web server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--questions", help="Question bank file or URL")
    parser.add_argument("--open", action="store_true", help="Open the page in a browser")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.questions:
        # read by api.config at import time
        os.environ["QUIZ_QUESTIONS_SOURCE"] = args.questions
    if args.open:
        url = f"http://{args.host}:{args.port}"
        threading.Timer(1.0, webbrowser.open, args=(url,)).start()

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
