"""Tkinter viewer: image with detection overlay and a confidence slider."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageTk
import tkinter as tk
from tkinter import filedialog, ttk, messagebox

from detection_viewer.config import AppConfig
from detection_viewer.detectors.base import Detector
from detection_viewer.detectors.tflite import TFLiteDetector
from detection_viewer.overlay.colors import to_hex
from detection_viewer.overlay.errors import InvalidImageSize, MalformedDetectionSet
from detection_viewer.overlay.filtering import RawDetectionSet
from detection_viewer.overlay.geometry import Size2D
from detection_viewer.overlay.renderer import OverlayPrimitive, OverlayRenderer
from detection_viewer.overlay.session import OverlaySession
from detection_viewer.utils.io import load_image, natural_size, to_rgb
from detection_viewer.utils.logging_utils import iso_timestamp, log_jsonl


class DetectionViewerGUI:
    """Image viewer that re-filters cached detections as the slider moves."""

    def __init__(self, config: AppConfig | None = None, detector: Detector | None = None) -> None:
        self.config = config or AppConfig()
        self.detector = detector or TFLiteDetector(self.config.detector)
        self.session = OverlaySession(OverlayRenderer.from_config(self.config.viewer))

        self.root = tk.Tk()
        self.root.title("Detection Viewer")
        self.root.minsize(960, 640)

        self.current_image: Optional[np.ndarray] = None
        self.current_path: Optional[Path] = None
        self._pil_image: Optional[Image.Image] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None
        self._tk_image_size: Tuple[int, int] = (0, 0)
        self._detect_thread: Optional[threading.Thread] = None

        self._apply_style()
        self._build_ui()
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

    def _apply_style(self) -> None:
        self.root.configure(bg="#f7f8fa")
        style = ttk.Style(self.root)
        style.theme_use("clam")

        style.configure("TFrame", background="#f7f8fa")
        style.configure("Card.TFrame", background="#ffffff")
        style.configure(
            "Header.TLabel",
            background="#f7f8fa",
            foreground="#0f172a",
            font=("Segoe UI", 18, "bold"),
        )
        style.configure(
            "TLabel",
            background="#ffffff",
            foreground="#0f172a",
            font=("Segoe UI", 10),
        )
        style.configure(
            "Status.TLabel",
            background="#ffffff",
            foreground="#475569",
            font=("Segoe UI", 9),
        )
        style.configure(
            "Value.TLabel",
            background="#f1f5f9",
            foreground="#0f172a",
            font=("Segoe UI", 9, "bold"),
            padding=(6, 2),
        )
        style.configure(
            "TLabelframe",
            background="#ffffff",
            foreground="#0f172a",
            bordercolor="#e2e8f0",
            relief="solid",
            borderwidth=1,
        )
        style.configure(
            "TLabelframe.Label",
            background="#ffffff",
            foreground="#334155",
            font=("Segoe UI", 9, "bold"),
        )
        style.configure(
            "TButton",
            background="#2563eb",
            foreground="#ffffff",
            borderwidth=0,
            focusthickness=0,
            padding=(10, 6),
        )
        style.map(
            "TButton",
            background=[("active", "#1d4ed8"), ("disabled", "#94a3b8")],
            foreground=[("disabled", "#f8fafc")],
        )

    def _build_ui(self) -> None:
        """Build the Tkinter layout.

        @return None
        """
        main = ttk.Frame(self.root, padding=16)
        main.pack(fill=tk.BOTH, expand=True)

        self.threshold_var = tk.DoubleVar(value=self.config.viewer.default_threshold)
        self.threshold_text = tk.StringVar(value=f"{self.threshold_var.get():.2f}")
        self.summary_var = tk.StringVar(value="Found: 0")
        self.status_var = tk.StringVar(value="Ready")

        header = ttk.Frame(main)
        header.pack(fill=tk.X, pady=(0, 12))
        ttk.Label(header, text="Detection Viewer", style="Header.TLabel").pack(
            side=tk.LEFT, anchor=tk.W
        )

        controls = ttk.Frame(main, style="Card.TFrame", padding=12)
        controls.pack(fill=tk.X)

        actions = ttk.LabelFrame(controls, text="Actions", padding=8)
        actions.pack(side=tk.LEFT, padx=(0, 12), pady=4)
        ttk.Button(actions, text="Open image", command=self._on_open).pack(side=tk.LEFT, padx=4)
        self.detect_button = ttk.Button(actions, text="Detect", command=self._on_detect)
        self.detect_button.pack(side=tk.LEFT, padx=4)

        slider = ttk.LabelFrame(controls, text="Confidence", padding=8)
        slider.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=(0, 12), pady=4)
        ttk.Scale(
            slider,
            from_=0.0,
            to=1.0,
            orient=tk.HORIZONTAL,
            variable=self.threshold_var,
            command=self._on_threshold,
        ).pack(side=tk.LEFT, fill=tk.X, expand=True, padx=6)
        ttk.Label(slider, textvariable=self.threshold_text, style="Value.TLabel").pack(
            side=tk.LEFT, padx=(6, 0)
        )

        ttk.Label(main, textvariable=self.status_var, style="Status.TLabel").pack(
            side=tk.BOTTOM, fill=tk.X, pady=(8, 0)
        )

        content = ttk.Frame(main, padding=0)
        content.pack(fill=tk.BOTH, expand=True, pady=(12, 0))

        sidebar = ttk.LabelFrame(content, text="Predictions", padding=8)
        sidebar.pack(side=tk.LEFT, fill=tk.Y, padx=(0, 12))
        ttk.Label(sidebar, textvariable=self.summary_var, style="Status.TLabel").pack(
            side=tk.TOP, anchor=tk.W, pady=(0, 6)
        )
        self.predictions = tk.Listbox(sidebar, width=40, height=24, borderwidth=0)
        self.predictions.pack(side=tk.TOP, fill=tk.Y, expand=True)

        view = ttk.LabelFrame(content, text="Image", padding=8)
        view.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        width, height = self.config.viewer.canvas_size
        self.canvas = tk.Canvas(view, width=width, height=height, bg="#0f172a", highlightthickness=0)
        self.canvas.pack(fill=tk.BOTH, expand=True)
        self.canvas.bind("<Configure>", lambda _event: self._redraw())

    def _container_size(self) -> Size2D:
        """Current canvas size; zero before the canvas is mapped.

        @return Container size.
        """
        if not self.canvas.winfo_ismapped():
            return Size2D(0, 0)
        return Size2D(self.canvas.winfo_width(), self.canvas.winfo_height())

    def _on_open(self) -> None:
        """Pick an image, show it and reset detections.

        @return None
        """
        path = filedialog.askopenfilename(
            title="Select image",
            filetypes=[("Images", "*.png *.jpg *.jpeg *.bmp"), ("All files", "*.*")],
        )
        if not path:
            return
        self.open_image(Path(path))

    def open_image(self, path: Path) -> None:
        """Load an image and start a new overlay for it.

        @param path Image path.
        @return None
        """
        try:
            image = load_image(path)
            size = natural_size(path, self.config.viewer.reference_dpi)
            self.session.on_image_loaded(size)
        except (FileNotFoundError, ValueError) as exc:
            self.session.discard_image()
            self.current_image = None
            self.current_path = None
            self._pil_image = None
            self._clear_predictions()
            self._redraw()
            messagebox.showerror("Error", f"Failed to load image: {exc}")
            return

        self.current_image = image
        self.current_path = path
        self._pil_image = Image.fromarray(to_rgb(image))
        self._tk_image = None
        self._clear_predictions()
        self.status_var.set(f"Loaded {path.name}")
        print(f"[LOAD] {path} natural={size.width:.0f}x{size.height:.0f}")
        self._redraw()

    def _on_detect(self) -> None:
        """Run the detector on a worker thread.

        @return None
        """
        if self.current_image is None:
            messagebox.showinfo("No image", "Open an image first.")
            return
        if self._detect_thread and self._detect_thread.is_alive():
            return
        token = self.session.token
        image = self.current_image.copy()
        self.status_var.set("Detecting...")
        self.detect_button.state(["disabled"])
        self._detect_thread = threading.Thread(
            target=self._detect_worker, args=(token, image), daemon=True
        )
        self._detect_thread.start()

    def _detect_worker(self, token: int, image: np.ndarray) -> None:
        """Detector call (runs on its own thread, never touches the session).

        @param token Load token at dispatch time.
        @param image Image copy (BGR).
        @return None
        """
        try:
            raw = self.detector.detect(image)
        except Exception as exc:
            self.root.after(0, self._on_detect_failed, token, exc)
            return
        self.root.after(0, self._on_detect_done, token, raw)

    def _on_detect_failed(self, token: int, exc: Exception) -> None:
        self.detect_button.state(["!disabled"])
        if token != self.session.token:
            return
        self.status_var.set("Detection failed")
        print(f"[DETECT] failed: {exc}")
        messagebox.showerror("Error", str(exc))

    def _on_detect_done(self, token: int, raw: RawDetectionSet) -> None:
        """Cache a finished detection run and draw it (Tk thread).

        @param token Load token the run was started with.
        @param raw Detection result.
        @return None
        """
        self.detect_button.state(["!disabled"])
        try:
            accepted = self.session.on_detection_complete(raw, token)
        except (MalformedDetectionSet, InvalidImageSize) as exc:
            self._clear_predictions()
            self.status_var.set("No detections")
            print(f"[DETECT] rejected: {exc}")
            self._redraw()
            return
        if not accepted:
            return

        self._clear_predictions()
        for line in self.session.summary_lines():
            self.predictions.insert(tk.END, line)
        count = self.session.found_count()
        self.summary_var.set(f"Found: {count}")
        self.status_var.set("Detection finished.")
        print(f"[DETECT] detections={count}")
        log_jsonl(
            self.config.events_log_path,
            {
                "timestamp": iso_timestamp(),
                "event": "detection_complete",
                "image": str(self.current_path) if self.current_path else None,
                "count": count,
            },
        )
        self._redraw()

    def _on_threshold(self, _value: str) -> None:
        self.threshold_text.set(f"{self.threshold_var.get():.2f}")
        self._redraw()

    def _clear_predictions(self) -> None:
        self.predictions.delete(0, tk.END)
        self.summary_var.set("Found: 0")

    def _redraw(self) -> None:
        """Draw the fitted image and overlay from the cached detections.

        @return None
        """
        self.canvas.delete("all")
        if self._pil_image is None or self.session.natural_size is None:
            return

        natural = self.session.natural_size
        geometry, _ = self.session.renderer.geometry_for(natural, self._container_size())
        size = (
            max(1, int(round(geometry.render_width))),
            max(1, int(round(geometry.render_height))),
        )
        if self._tk_image is None or self._tk_image_size != size:
            resized = self._pil_image.resize(size, Image.Resampling.LANCZOS)
            self._tk_image = ImageTk.PhotoImage(resized)
            self._tk_image_size = size
        self.canvas.create_image(
            geometry.offset_x, geometry.offset_y, image=self._tk_image, anchor=tk.NW
        )

        result = self.session.render(self._container_size(), self.threshold_var.get())
        if not result.ok:
            self.status_var.set("No detections")
            return
        for prim in result.primitives:
            self._draw_primitive(prim)

    def _draw_primitive(self, prim: OverlayPrimitive) -> None:
        """Draw one box and its label on the canvas.

        @param prim Overlay primitive.
        @return None
        """
        rect = prim.rect
        self.canvas.create_rectangle(
            rect.left,
            rect.top,
            rect.left + rect.width,
            rect.top + rect.height,
            outline=to_hex(rect.stroke_color),
            width=rect.stroke_thickness,
        )
        label = prim.label
        pad = label.padding
        text_id = self.canvas.create_text(
            label.left + pad,
            label.top + pad,
            text=label.text,
            anchor=tk.NW,
            fill=to_hex(label.foreground_color),
            font=("Segoe UI", -label.font_size),
        )
        x0, y0, x1, y1 = self.canvas.bbox(text_id)
        bg_id = self.canvas.create_rectangle(
            x0 - pad,
            y0 - pad,
            x1 + pad,
            y1 + pad,
            fill=to_hex(label.background_color),
            width=0,
        )
        self.canvas.tag_lower(bg_id, text_id)

    def _on_close(self) -> None:
        """Handle window close event.

        @return None
        """
        self.root.quit()
        self.root.destroy()


def launch_gui(config: AppConfig | None = None, detector: Detector | None = None) -> None:
    """Launch the Tkinter GUI.

    @param config Application config.
    @param detector Detector to use (TFLite by default).
    @return None
    """
    app = DetectionViewerGUI(config, detector)
    app.root.mainloop()


if __name__ == "__main__":
    launch_gui()
