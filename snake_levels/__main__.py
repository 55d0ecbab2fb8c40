from snake_levels.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
