import argparse, logging

from .settings import LOG_FORMAT, SAVE_FILE

def main():
    parser = argparse.ArgumentParser(prog="happyfarm", description="Run Happy Farm.")
    parser.add_argument("--save", type=str, default=SAVE_FILE, help="Path to the JSON save file.")
    parser.add_argument("--new", action="store_true", help="Start a new farm instead of loading the save.")
    parser.add_argument("--debug", action="store_true", help="Log every refused action and save.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO, format=LOG_FORMAT)

    # pygame is only imported once we know we are opening a window
    from .app import run
    run(args.save, new_game=args.new)

if __name__ == "__main__":
    main()
