"""High-level orchestration of a folder translation job."""

from __future__ import annotations

import pathlib
import random
import shutil
import time
from dataclasses import dataclass, field
from typing import Callable, List

from .batch import BatchTranslator
from .errors import (
    ErrorCategory,
    NoScriptFilesError,
    OutputDirectoryError,
    VNTranslateError,
)
from .events import EventSink, NullEventSink, Severity
from .extractor import extract_pending, read_script_lines
from .memory import TranslationMemory
from .policy import ErrorPolicy
from .providers import TranslationProvider
from .rewriter import render_script, rewrite_lines
from .structures import Job

DEFAULT_EXTENSION = ".rpy"
JOB_ID_ATTEMPTS = 20


@dataclass
class JobSummary:
    """Report returned after processing a folder."""

    job_id: str
    source_folder: pathlib.Path
    original_dir: pathlib.Path
    translated_dir: pathlib.Path
    target_language: str
    batch_size: int
    provider_name: str
    total_files: int
    processed_files: int
    failed_files: int
    pending_strings: int
    translated_strings: int
    total_batches: int
    failed_batches: int
    memory_entries: int
    elapsed_seconds: float
    error_messages: List[str] = field(default_factory=list)


def generate_job_id(rng: random.Random | None = None) -> str:
    """Return a random 5-digit identifier."""

    source = rng or random
    return str(source.randint(10000, 99999))


def discover_script_files(folder: pathlib.Path, extension: str = DEFAULT_EXTENSION) -> List[pathlib.Path]:
    """Find script files recursively under ``folder`` in sorted order.

    Hidden entries (any path part starting with ``.``) are skipped.
    """

    suffix = extension if extension.startswith(".") else f".{extension}"
    return sorted(
        path
        for path in folder.rglob(f"*{suffix}")
        if path.is_file()
        and not any(part.startswith(".") for part in path.relative_to(folder).parts)
    )


class JobRunner:
    """Coordinates backup, extraction, translation and rewriting for one folder."""

    def __init__(
        self,
        *,
        source_folder: pathlib.Path,
        target_language: str,
        batch_size: int,
        provider: TranslationProvider,
        memory_path: pathlib.Path,
        output_root: pathlib.Path,
        extension: str = DEFAULT_EXTENSION,
        sink: EventSink | None = None,
        id_factory: Callable[[], str] = generate_job_id,
    ) -> None:
        self.source_folder = source_folder
        self.target_language = target_language
        self.batch_size = max(1, batch_size)
        self.provider = provider
        self.memory_path = memory_path
        self.output_root = output_root
        self.extension = extension
        self.sink = sink or NullEventSink()
        self.id_factory = id_factory

        self.error_policy = ErrorPolicy(self.sink)

    def run(self) -> JobSummary:
        start_time = time.time()

        job = self._create_job()
        self._prepare_directories(job)

        memory = TranslationMemory.load(self.memory_path)
        if len(memory):
            self.sink.log(f"Loaded translation memory: {len(memory)} entries", Severity.SUCCESS)

        files = [
            path
            for path in discover_script_files(self.source_folder, self.extension)
            if not _is_within(path, self.output_root)
        ]
        if not files:
            message = f"No {self.extension} files found in {self.source_folder}."
            self.sink.log(message, Severity.ERROR)
            raise NoScriptFilesError(message)

        self.sink.log(f"Created job {job.job_id}", Severity.INFO)
        self.sink.log(f"Originals backed up to Original/{job.job_id}", Severity.INFO)

        batch_translator = BatchTranslator(
            provider=self.provider,
            memory=memory,
            target_language=self.target_language,
            batch_size=self.batch_size,
            error_policy=self.error_policy,
        )

        summary = JobSummary(
            job_id=job.job_id,
            source_folder=self.source_folder,
            original_dir=job.original_dir,
            translated_dir=job.translated_dir,
            target_language=self.target_language,
            batch_size=self.batch_size,
            provider_name=self.provider.name,
            total_files=len(files),
            processed_files=0,
            failed_files=0,
            pending_strings=0,
            translated_strings=0,
            total_batches=0,
            failed_batches=0,
            memory_entries=0,
            elapsed_seconds=0.0,
        )

        for index, path in enumerate(files, start=1):
            relative = path.relative_to(self.source_folder)
            try:
                self._backup(path, job.original_dir / relative)
                self._process_file(
                    path,
                    job.translated_dir / relative,
                    memory=memory,
                    batch_translator=batch_translator,
                    summary=summary,
                )
                summary.processed_files += 1
            except (OSError, UnicodeDecodeError) as exc:
                summary.failed_files += 1
                self.error_policy.handle_error(
                    ErrorCategory.FILE_IO,
                    f"Could not process {relative}: {exc}",
                )
            self.sink.progress(index / len(files) * 100)

        memory.save(self.memory_path)

        summary.memory_entries = len(memory)
        summary.elapsed_seconds = time.time() - start_time
        summary.error_messages = [record.message for record in self.error_policy.records]

        self.sink.log(
            f"Translation complete. Files are in Translated/{job.job_id}",
            Severity.SUCCESS,
        )
        self.sink.done(summary)
        return summary

    def _create_job(self) -> Job:
        for _ in range(JOB_ID_ATTEMPTS):
            job = Job(
                job_id=self.id_factory(),
                source_folder=self.source_folder,
                target_language=self.target_language,
                batch_size=self.batch_size,
                output_root=self.output_root,
            )
            if not job.original_dir.exists() and not job.translated_dir.exists():
                return job
        raise OutputDirectoryError(
            f"Could not find an unused job id under {self.output_root}."
        )

    def _prepare_directories(self, job: Job) -> None:
        try:
            job.original_dir.mkdir(parents=True, exist_ok=True)
            job.translated_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            message = f"Could not create output folders: {exc}"
            self.sink.log(message, Severity.ERROR)
            raise OutputDirectoryError(message) from exc

    def _backup(self, source: pathlib.Path, destination: pathlib.Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)

    def _process_file(
        self,
        source: pathlib.Path,
        destination: pathlib.Path,
        *,
        memory: TranslationMemory,
        batch_translator: BatchTranslator,
        summary: JobSummary,
    ) -> None:
        self.sink.log(f"Processing {source.name}", Severity.INFO)

        lines = read_script_lines(source)
        pending = extract_pending(lines, memory)
        if pending:
            outcome = batch_translator.translate(pending, file_label=source.name)
            summary.pending_strings += len(pending)
            summary.translated_strings += outcome.translated
            summary.total_batches += outcome.batches
            summary.failed_batches += outcome.failed_batches

        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("w", encoding="utf-8", newline="") as handle:
            handle.write(render_script(rewrite_lines(lines, memory)))


def validate_source_folder(folder: pathlib.Path) -> None:
    """Ensure the source folder exists and is a directory."""

    if not folder.exists():
        raise FileNotFoundError(f"Source folder not found: {folder}")
    if not folder.is_dir():
        raise VNTranslateError("Source path must be a folder.")


def _is_within(path: pathlib.Path, folder: pathlib.Path) -> bool:
    try:
        path.resolve().relative_to(folder.resolve())
    except ValueError:
        return False
    return True
