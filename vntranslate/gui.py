"""Tkinter-based desktop window for running folder translations."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

import tkinter as tk
from tkinter import filedialog, messagebox, ttk

from .events import EventSink, Severity
from .translator import JobSummary


JobExecutor = Callable[..., tuple[int, Optional[JobSummary], Optional[str]]]

SEVERITY_COLOURS = {
    Severity.INFO: "#c8c8d0",
    Severity.SUCCESS: "#7ddc8a",
    Severity.ERROR: "#ff7b7b",
}


class TkEventSink(EventSink):
    """Forwards notifications from the worker thread onto the Tk event loop."""

    def __init__(self, gui: "TranslatorGUI") -> None:
        self.gui = gui

    def log(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.gui.root.after(0, self.gui.append_log, message, severity)

    def progress(self, percent: float) -> None:
        self.gui.root.after(0, self.gui.progress_var.set, percent)

    def done(self, summary: JobSummary) -> None:
        self.gui.root.after(0, self.gui.progress_var.set, 100.0)


class TranslatorGUI:
    """Folder picker, job inputs, log pane and progress bar."""

    def __init__(
        self,
        *,
        root: tk.Tk,
        source_folder: str | None,
        target_language: str | None,
        job_executor: JobExecutor,
        job_options: dict[str, Any],
    ) -> None:
        self.root = root
        self.job_executor = job_executor
        self.job_options = dict(job_options)

        self.exit_code: int = 0
        self.job_in_progress = False

        self.folder_var = tk.StringVar(value=source_folder or "")
        self.language_var = tk.StringVar(value=target_language or "")
        self.batch_size_var = tk.StringVar(value=str(self.job_options.get("batch_size") or 10))
        self.provider_var = tk.StringVar(value=self.job_options.get("provider") or "")
        self.progress_var = tk.DoubleVar(value=0.0)

        self._build_ui()
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

    def _build_ui(self) -> None:
        self.root.title("VN Script Translator")
        self.root.geometry("900x800")
        self.root.configure(background="#1e1e24")

        main_frame = ttk.Frame(self.root, padding=20)
        main_frame.grid(row=0, column=0, sticky="nsew")
        main_frame.columnconfigure(0, weight=1)
        main_frame.rowconfigure(9, weight=1)

        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        ttk.Label(main_frame, text="Game script folder").grid(row=0, column=0, sticky="w")
        ttk.Entry(main_frame, textvariable=self.folder_var).grid(
            row=1, column=0, sticky="we", pady=(0, 10)
        )
        ttk.Button(main_frame, text="Browse…", command=self._choose_folder).grid(
            row=1, column=1, padx=(10, 0), sticky="we"
        )

        ttk.Label(main_frame, text="Target language code").grid(row=2, column=0, sticky="w")
        ttk.Entry(main_frame, textvariable=self.language_var, width=20).grid(
            row=3, column=0, sticky="w", pady=(0, 10)
        )

        ttk.Label(main_frame, text="Batch size (strings per request)").grid(
            row=4, column=0, sticky="w"
        )
        ttk.Entry(main_frame, textvariable=self.batch_size_var, width=20).grid(
            row=5, column=0, sticky="w", pady=(0, 10)
        )

        ttk.Label(main_frame, text="Provider").grid(row=6, column=0, sticky="w")
        ttk.Entry(main_frame, textvariable=self.provider_var, width=20).grid(
            row=7, column=0, sticky="w", pady=(0, 10)
        )

        ttk.Progressbar(
            main_frame,
            variable=self.progress_var,
            maximum=100.0,
            mode="determinate",
        ).grid(row=8, column=0, columnspan=2, sticky="we", pady=(5, 10))

        self.log_text = tk.Text(
            main_frame,
            height=20,
            background="#16161a",
            foreground=SEVERITY_COLOURS[Severity.INFO],
            state="disabled",
            wrap="word",
        )
        self.log_text.grid(row=9, column=0, columnspan=2, sticky="nsew")
        for severity, colour in SEVERITY_COLOURS.items():
            self.log_text.tag_configure(severity.value, foreground=colour)

        self.start_button = ttk.Button(main_frame, text="Start", command=self._on_start)
        self.start_button.grid(row=10, column=1, sticky="e", pady=(10, 0))

        self.root.bind("<Return>", lambda event: self._on_start())

    def append_log(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.log_text.configure(state="normal")
        self.log_text.insert("end", message + "\n", severity.value)
        self.log_text.see("end")
        self.log_text.configure(state="disabled")

    def _choose_folder(self) -> None:
        selection = filedialog.askdirectory(title="Select the game script folder")
        if selection:
            self.folder_var.set(selection)

    def _on_start(self) -> None:
        """Validate the inputs and run the job on a worker thread."""

        if self.job_in_progress:
            return

        folder = self.folder_var.get().strip()
        language = self.language_var.get().strip()
        if not folder:
            messagebox.showerror("VN Script Translator", "Please choose a script folder.")
            return
        if not language:
            messagebox.showerror("VN Script Translator", "Please provide a target language code.")
            return
        try:
            batch_size = int(self.batch_size_var.get())
            if batch_size <= 0:
                raise ValueError
        except ValueError:
            messagebox.showerror(
                "VN Script Translator",
                "Batch size must be a positive integer.",
            )
            return

        options = dict(self.job_options)
        options["batch_size"] = batch_size
        options["provider"] = self.provider_var.get().strip() or options.get("provider")

        self.job_in_progress = True
        self.progress_var.set(0.0)
        self.start_button.config(state="disabled")

        threading.Thread(
            target=self._execute_job,
            args=(folder, language, options),
            daemon=True,
        ).start()

    def _execute_job(self, folder: str, language: str, options: dict[str, Any]) -> None:
        exit_code, summary, message = self.job_executor(
            source_folder=folder,
            target_language=language,
            sink=TkEventSink(self),
            **options,
        )
        self.root.after(0, self._handle_result, exit_code, summary, message)

    def _handle_result(
        self,
        exit_code: int,
        summary: Optional[JobSummary],
        message: Optional[str],
    ) -> None:
        self.job_in_progress = False
        self.start_button.config(state="normal")
        self.exit_code = exit_code

        if exit_code == 0 and summary is not None:
            messagebox.showinfo(
                "VN Script Translator",
                "Translation finished.\n"
                f"Translated files are in:\n{summary.translated_dir}",
            )
        elif message:
            messagebox.showerror("VN Script Translator", message)

    def _on_close(self) -> None:
        if self.job_in_progress:
            confirm = messagebox.askyesno(
                "VN Script Translator",
                "A translation is still running. Quit anyway? "
                "Translation memory gathered by this run will not be saved.",
            )
            if not confirm:
                return
            self.exit_code = 2
        self.root.destroy()


def launch_gui(
    *,
    source_folder: str | None,
    target_language: str | None,
    job_executor: JobExecutor,
    job_options: dict[str, Any],
) -> int:
    """Entry point called from the CLI when --gui is provided."""

    root = tk.Tk()
    app = TranslatorGUI(
        root=root,
        source_folder=source_folder,
        target_language=target_language,
        job_executor=job_executor,
        job_options=job_options,
    )
    root.mainloop()
    return app.exit_code
