import asyncio
import os
import sys
from pathlib import Path

from nova.nova_runtime import ScriptRunner

# A basic awaitable input prompt.
async def ainput(prompt: str) -> str:
    loop = asyncio.get_running_loop()
    sys.stdout.write(prompt)
    sys.stdout.flush()
    return await loop.run_in_executor(None, sys.stdin.readline)

def strict_from_env() -> bool:
    return os.environ.get("NOVA_STRICT", "").strip().lower() in ("1", "true", "yes")

def make_runner() -> ScriptRunner:
    return ScriptRunner(strict=strict_from_env())

def report(result) -> bool:
    """Print one line's outcome. Returns False when the line failed."""
    if result.status == 'error':
        if result.errors:
            # Parse errors: one per line, nothing was evaluated
            for msg in result.errors:
                print(f"\t{msg}")
        else:
            print(result.format_error(), file=sys.stderr)
        return False
    print(result.display())
    return True

async def run_script_file(file_path: str):
    """Run a Nova script file line by line and exit with appropriate status."""
    runner = make_runner()
    p = Path(file_path)
    try:
        source = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: file not found: {file_path}", file=sys.stderr)
        raise SystemExit(1)
    result = None
    for line in source.splitlines():
        if not line.strip():
            continue
        result = runner.handle_script(line)
        if result.status == 'error':
            if result.errors:
                for msg in result.errors:
                    print(msg, file=sys.stderr)
            else:
                print(result.format_error(), file=sys.stderr)
            raise SystemExit(1)
    if result is not None:
        print(result.display())

async def main():
    """Run a script file when provided, otherwise start the interactive REPL."""
    if len(sys.argv) > 1:
        arg = sys.argv[1]
        if not arg.startswith("-"):
            await run_script_file(arg)
            return

    print("Nova REPL v0.1")
    print("Type 'exit' or press Ctrl+D to quit.")

    # One runner, so bindings persist across lines
    runner = make_runner()

    # REPL Loop
    while True:
        try:
            raw = await ainput(">> ")
            if raw == "":
                raise EOFError
            line = raw.strip()

            if not line:
                continue
            if line == "exit":
                break

            report(runner.handle_script(line))

        except EOFError:
            print("\nExiting.")
            break

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nExiting.")
