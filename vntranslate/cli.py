"""Command line interface for the script translator."""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Iterable, Mapping, Optional

from .configuration import get_settings, provider_credentials
from .errors import (
    NoScriptFilesError,
    OutputDirectoryError,
    TranslationMemoryError,
    TranslationProviderConfigurationError,
    VNTranslateError,
)
from .events import ConsoleEventSink, EventSink
from .providers import build_provider
from .translator import JobRunner, JobSummary, validate_source_folder


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("batch size must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vntranslate",
        description=(
            "Translate the dialogue strings of visual novel script files, "
            "reusing a persistent translation memory."
        ),
    )
    parser.add_argument(
        "source_folder",
        nargs="?",
        help="Folder searched recursively for script files.",
    )
    parser.add_argument(
        "-t",
        "--target-language",
        required=False,
        help="Target language code understood by the provider (for example 'th').",
    )
    parser.add_argument(
        "-b",
        "--batch-size",
        type=positive_int,
        help="Strings sent per translation request (default: 10).",
    )
    parser.add_argument(
        "-p",
        "--provider",
        help="Translation provider: google, openai, azure_openai or echo (default: google).",
    )
    parser.add_argument(
        "-m",
        "--model",
        help="Model or deployment used by the OpenAI providers.",
    )
    parser.add_argument(
        "--memory-file",
        help="Translation memory JSON file (default: translation_memory.json).",
    )
    parser.add_argument(
        "--output-root",
        help="Folder receiving Original/<id> and Translated/<id> (default: MyTranslations).",
    )
    parser.add_argument(
        "--extension",
        help="Script file extension to search for (default: .rpy).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress after every file.",
    )
    parser.add_argument(
        "--debug-provider",
        action="store_true",
        help="Log complete provider requests and responses for troubleshooting.",
    )
    parser.add_argument(
        "--gui",
        action="store_true",
        help="Launch the desktop window.",
    )
    return parser


def execute_job(
    *,
    source_folder: str,
    target_language: str,
    batch_size: int,
    provider: str | None,
    model: str | None,
    memory_file: str,
    output_root: str,
    extension: str,
    verbose: bool,
    provider_debug: bool,
    credentials: Mapping[str, str | None] | None = None,
    sink: EventSink | None = None,
) -> tuple[int, JobSummary | None, str | None]:
    """Execute a translation job and return the exit code, summary, and message."""

    source_path = pathlib.Path(source_folder).expanduser().resolve()
    try:
        validate_source_folder(source_path)
    except FileNotFoundError as exc:
        return 1, None, str(exc)
    except VNTranslateError as exc:
        return 1, None, str(exc)

    try:
        translation_provider = build_provider(
            provider,
            model=model,
            debug=provider_debug,
            credentials=credentials,
        )
    except TranslationProviderConfigurationError as exc:
        return 1, None, str(exc)

    runner = JobRunner(
        source_folder=source_path,
        target_language=target_language,
        batch_size=batch_size,
        provider=translation_provider,
        memory_path=pathlib.Path(memory_file).expanduser(),
        output_root=pathlib.Path(output_root).expanduser(),
        extension=extension,
        sink=sink or ConsoleEventSink(verbose=verbose),
    )

    try:
        summary = runner.run()
    except (OutputDirectoryError, NoScriptFilesError) as exc:
        return 1, None, str(exc)
    except TranslationMemoryError as exc:
        return 1, None, str(exc)
    except VNTranslateError as exc:
        return 1, None, str(exc)
    except KeyboardInterrupt:
        return 2, None, "Translation interrupted by user."
    except Exception as exc:  # pragma: no cover - defensive catch
        error_message = (
            f"{exc}\n"
            "An unexpected error occurred. Please rerun with --verbose for more details."
        )
        return 1, None, error_message

    return 0, summary, None


def print_summary(summary: JobSummary) -> None:
    """Output a friendly report once processing completes."""

    print("\nTranslation complete.")
    print(f"  Job id:          {summary.job_id}")
    print(f"  Source folder:   {summary.source_folder}")
    print(f"  Originals:       {summary.original_dir}")
    print(f"  Translations:    {summary.translated_dir}")
    print(
        "  Files:           "
        f"{summary.processed_files} processed / {summary.total_files} total "
        f"({summary.failed_files} failed)"
    )
    print(
        f"  Strings:         {summary.translated_strings} translated "
        f"of {summary.pending_strings} new"
    )
    print(
        f"  Batches:         {summary.total_batches} "
        f"({summary.failed_batches} failed, size {summary.batch_size})"
    )
    print(f"  Provider:        {summary.provider_name}")
    print(f"  Target language: {summary.target_language}")
    print(f"  Memory entries:  {summary.memory_entries}")
    print(f"  Elapsed time:    {summary.elapsed_seconds:.2f} seconds")
    if summary.error_messages:
        print("  Notes:")
        for message in summary.error_messages:
            print(f"    - {message}")


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = get_settings()
    except TranslationProviderConfigurationError as exc:
        print(exc)
        return 1

    job_options = {
        "batch_size": args.batch_size or settings.VNTRANSLATE_BATCH_SIZE,
        "provider": args.provider or settings.TRANSLATION_PROVIDER,
        "model": args.model or settings.OPENAI_MODEL,
        "memory_file": args.memory_file or settings.VNTRANSLATE_MEMORY_FILE,
        "output_root": args.output_root or settings.VNTRANSLATE_OUTPUT_ROOT,
        "extension": args.extension or settings.VNTRANSLATE_SCRIPT_EXTENSION,
        "verbose": args.verbose,
        "provider_debug": bool(args.debug_provider or settings.VNTRANSLATE_PROVIDER_DEBUG),
        "credentials": provider_credentials(settings),
    }

    if args.gui:
        from .gui import launch_gui

        return launch_gui(
            source_folder=args.source_folder,
            target_language=args.target_language,
            job_executor=execute_job,
            job_options=job_options,
        )

    if args.source_folder is None:
        parser.error("the following arguments are required: source_folder")
    if not args.target_language:
        parser.error("the following arguments are required: -t/--target-language")

    exit_code, summary, message = execute_job(
        source_folder=args.source_folder,
        target_language=args.target_language,
        **job_options,
    )

    if message:
        print(message)
    if summary:
        print_summary(summary)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
