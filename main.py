import argparse
import logging
import sys
from pathlib import Path

# Make the local package importable without installation.
ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT / "src"))

from designrender import CompositionRender, get_settings


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Render a design Composition JSON file to HTML/CSS and a debug overlay."
    )
    parser.add_argument(
        "input",
        help="Path to Composition JSON input.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Output directory (default: <input_stem>_html next to the input).",
    )
    parser.add_argument(
        "--no-debug",
        action="store_true",
        help="Skip the debug overlay files.",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (default: %(default)s).",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_arg = Path(args.input)
    input_path = input_arg if input_arg.is_absolute() else (ROOT / input_arg)
    if not input_path.exists():
        raise FileNotFoundError(f"Input JSON not found: {input_path}")
    output_dir = (
        Path(args.output)
        if args.output
        else input_path.with_name(f"{input_path.stem}_html")
    )
    if not output_dir.is_absolute():
        output_dir = ROOT / output_dir

    if args.no_debug:
        settings = settings.model_copy(update={"debug_enabled": False})

    render = CompositionRender.from_file(input_path, settings=settings)
    written = render.write(output_dir)
    print(f"Rendered: {written['html']}")


if __name__ == "__main__":
    main(sys.argv[1:])
