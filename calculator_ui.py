"""
Interfaz gráfica de la calculadora científica.

Usa tkinter. Solo habla con CalculatorController: reenvía botones y
teclas, y pinta el DisplayState y el historial que recibe. Los
destellos de error y de botón se programan con after() y nunca
bloquean la entrada.
"""

import tkinter as tk
from tkinter import font as tkfont

from calculator_controller import CalculatorController, resolve_key


# ═════════════════════════════════════════════════════════════════
#  Aplicación principal
# ═════════════════════════════════════════════════════════════════

class CalculatorApp:
    """Ventana principal de la calculadora científica."""

    # ── Paletas de colores ───────────────────────────────────────
    DARK = {
        "bg":         "#1E1E2E",
        "display_bg": "#181825",
        "error_bg":   "#5C2433",
        "num":        "#313244",
        "num_fg":     "#CDD6F4",
        "op":         "#F38BA8",
        "op_fg":      "#1E1E2E",
        "func":       "#45475A",
        "func_fg":    "#CDD6F4",
        "special":    "#585B70",
        "special_fg": "#CDD6F4",
        "equals":     "#89B4FA",
        "equals_fg":  "#1E1E2E",
        "flash":      "#7F849C",
        "expr_fg":    "#BAC2DE",
        "result_fg":  "#A6E3A1",
    }

    LIGHT = {
        "bg":         "#EFF1F5",
        "display_bg": "#E6E9EF",
        "error_bg":   "#F5C2CB",
        "num":        "#CCD0DA",
        "num_fg":     "#4C4F69",
        "op":         "#D20F39",
        "op_fg":      "#EFF1F5",
        "func":       "#BCC0CC",
        "func_fg":    "#4C4F69",
        "special":    "#ACB0BE",
        "special_fg": "#4C4F69",
        "equals":     "#1E66F5",
        "equals_fg":  "#EFF1F5",
        "flash":      "#9CA0B0",
        "expr_fg":    "#5C5F77",
        "result_fg":  "#40A02B",
    }

    # ── Definiciones del teclado ─────────────────────────────────
    #  Cada fila es una lista de (texto, comando, tipo_color)
    #  comando: "token:<texto>", "function:<nombre>" o "action:<nombre>"

    KEYPAD = [
        [("sin", "function:sin", "func"), ("cos", "function:cos", "func"),
         ("tan", "function:tan", "func"), ("log", "function:log", "func"),
         ("ln",  "function:ln",  "func")],

        [("√", "function:sqrt", "func"), ("x²", "function:square", "func"),
         ("π", "function:pi", "func"), ("e", "function:e", "func"),
         ("Ans", "function:ans", "func")],

        [("(", "token:(", "func"), (")", "token:)", "func"),
         ("^", "token:^", "op"), ("%", "action:percent", "func"),
         ("÷", "token:/", "op")],

        [("7", "token:7", "num"), ("8", "token:8", "num"),
         ("9", "token:9", "num"), ("×", "token:*", "op")],

        [("4", "token:4", "num"), ("5", "token:5", "num"),
         ("6", "token:6", "num"), ("−", "token:-", "op")],

        [("1", "token:1", "num"), ("2", "token:2", "num"),
         ("3", "token:3", "num"), ("+", "token:+", "op")],

        [("AC", "action:clear", "special"), ("⌫", "action:delete", "special"),
         ("00", "action:double-zero", "num"), ("0", "token:0", "num")],

        [(".", "action:dot", "num"), ("=", "action:equals", "equals")],
    ]

    # ────────────────────────────────────────────────────────────

    def __init__(self, root: tk.Tk, controller=None, settings=None):
        self.root = root
        self.root.title("Calculadora Científica")
        self.root.resizable(False, False)

        self.controller = controller if controller is not None else CalculatorController()
        self._error_flash_ms = getattr(settings, "error_flash_ms", 200)
        self._button_flash_ms = getattr(settings, "button_flash_ms", 90)
        self.C = self.DARK
        self._buttons: dict[str, tk.Button] = {}
        self._button_kinds: dict[str, str] = {}

        self._init_fonts()
        self._create_display()
        self._create_toggle_bar()
        self._create_keypad()
        self._create_history_panel()
        self._bind_keyboard()

        self.controller.on_error(self._show_error)
        self._apply_theme()
        self._render(self.controller.display_state())
        self._render_history()

    # ── Fuentes ──────────────────────────────────────────────────

    def _init_fonts(self):
        self._f_expr   = tkfont.Font(family="Consolas", size=13)
        self._f_result = tkfont.Font(family="Consolas", size=22, weight="bold")
        self._f_btn    = tkfont.Font(family="Segoe UI", size=15)
        self._f_func   = tkfont.Font(family="Segoe UI", size=12)
        self._f_small  = tkfont.Font(family="Segoe UI", size=11)

    # ── Pantalla ─────────────────────────────────────────────────

    def _create_display(self):
        self._display_frame = tk.Frame(self.root, padx=12, pady=8)
        self._display_frame.pack(fill="x", padx=6, pady=(6, 2))

        self.expr_label = tk.Label(self._display_frame, font=self._f_expr,
                                   anchor="e")
        self.expr_label.pack(fill="x", pady=(4, 0))

        self.main_var = tk.StringVar(value="0")
        self.main_label = tk.Label(self._display_frame, textvariable=self.main_var,
                                   font=self._f_result, anchor="e")
        self.main_label.pack(fill="x", pady=(2, 4))

    # ── Barra de toggles (DEG/RAD · tema) ────────────────────────

    def _create_toggle_bar(self):
        self._toggle_frame = tk.Frame(self.root)
        self._toggle_frame.pack(fill="x", padx=6, pady=(2, 2))

        self.angle_btn = tk.Button(
            self._toggle_frame, text=self.controller.session.angle_mode.upper(),
            font=self._f_small, width=6, relief="flat",
            command=self._toggle_angle,
        )
        self.angle_btn.pack(side="left", padx=(0, 4))

        self.theme_btn = tk.Button(
            self._toggle_frame, text="☾", font=self._f_small, width=4,
            relief="flat", command=self._toggle_theme,
        )
        self.theme_btn.pack(side="right")

    # ── Teclado ──────────────────────────────────────────────────

    def _create_keypad(self):
        self._keypad_frame = tk.Frame(self.root)
        self._keypad_frame.pack(fill="both", expand=True, padx=6, pady=(2, 6))

        max_cols = max(len(row) for row in self.KEYPAD)
        for c in range(max_cols):
            self._keypad_frame.columnconfigure(c, weight=1, uniform="key")

        for r, row_def in enumerate(self.KEYPAD):
            spans = self._compute_spans(len(row_def), max_cols)
            col_pos = 0
            for idx, (text, command, kind) in enumerate(row_def):
                font = self._f_func if kind == "func" else self._f_btn
                btn = tk.Button(
                    self._keypad_frame, text=text, font=font, relief="flat",
                    command=lambda c=command: self._on_command(c),
                )
                btn.grid(row=r, column=col_pos, columnspan=spans[idx],
                         sticky="nsew", padx=2, pady=2, ipady=6)
                self._buttons[command] = btn
                self._button_kinds[command] = kind
                col_pos += spans[idx]

        for r in range(len(self.KEYPAD)):
            self._keypad_frame.rowconfigure(r, weight=1)

    @staticmethod
    def _compute_spans(cols_in_row: int, max_cols: int) -> list[int]:
        """Reparte max_cols entre cols_in_row botones."""
        base, extra = divmod(max_cols, cols_in_row)
        spans = [base] * cols_in_row
        # Asignar columnas extra al último botón (generalmente '=')
        spans[-1] += extra
        return spans

    # ── Historial ────────────────────────────────────────────────

    def _create_history_panel(self):
        self._history_frame = tk.Frame(self.root)

        header = tk.Frame(self._history_frame)
        header.pack(fill="x")
        self._history_title = tk.Label(header, text="Historial",
                                       font=self._f_small, anchor="w")
        self._history_title.pack(side="left")
        self._clear_history_btn = tk.Button(
            header, text="Borrar", font=self._f_small, relief="flat",
            command=self._clear_history,
        )
        self._clear_history_btn.pack(side="right")

        self.history_list = tk.Listbox(self._history_frame, font=self._f_expr,
                                       height=6, relief="flat",
                                       activestyle="none")
        self.history_list.pack(fill="both", expand=True, pady=(2, 0))
        self.history_list.bind("<<ListboxSelect>>", self._on_history_select)

    def _render_history(self):
        entries = self.controller.get_history()
        self.history_list.delete(0, tk.END)
        for entry in entries:
            result = self.controller.session.engine.format_result(entry.result)
            self.history_list.insert(tk.END, f"{entry.expression} = {result}")

        # Ocultar el panel si no hay entradas
        if entries:
            self._history_frame.pack(fill="both", padx=6, pady=(0, 6))
        else:
            self._history_frame.pack_forget()

    def _on_history_select(self, _event):
        selection = self.history_list.curselection()
        if not selection:
            return
        self.controller.on_history_select(selection[0])
        self._render(self.controller.display_state())

    def _clear_history(self):
        self.controller.on_clear_history()
        self._render_history()

    # ── Atajos de teclado ────────────────────────────────────────

    def _bind_keyboard(self):
        self.root.bind("<Key>", self._on_key)

    def _on_key(self, event):
        resolved = resolve_key(event.char, event.keysym)
        if resolved is None:
            return None
        kind, name = resolved
        if kind == "toggle":
            if name == "angle":
                self._toggle_angle()
                self._flash(self.angle_btn, "special")
            else:
                self._toggle_theme()
                self._flash(self.theme_btn, "special")
            return "break"
        self._on_command(f"{kind}:{name}")
        return "break"

    # ── Acciones ─────────────────────────────────────────────────

    def _on_command(self, command: str):
        kind, _, name = command.partition(":")
        if kind == "token":
            state = self.controller.on_token(name)
        elif kind == "function":
            state = self.controller.on_function(name)
        else:
            state = self.controller.on_action(name)

        btn = self._buttons.get(command)
        if btn is not None:
            self._flash(btn, self._button_kinds[command])
        self._render(state)
        if command == "action:equals":
            self._render_history()

    def _render(self, state):
        self.expr_label.config(text=state.expression_line)
        self.main_var.set(state.main_line)

    def _toggle_angle(self):
        label = self.controller.on_toggle_angle_mode()
        self.angle_btn.config(text=label)

    def _toggle_theme(self):
        self.C = self.LIGHT if self.C is self.DARK else self.DARK
        self.theme_btn.config(text="☀" if self.C is self.LIGHT else "☾")
        self._apply_theme()

    # ── Destellos ────────────────────────────────────────────────

    def _flash(self, btn: tk.Button, kind: str):
        btn.config(bg=self.C["flash"])
        # El color se resuelve al restaurar por si cambió el tema
        self.root.after(self._button_flash_ms, lambda: btn.config(bg=self.C[kind]))

    def _show_error(self):
        widgets = (self._display_frame, self.expr_label, self.main_label)
        for widget in widgets:
            widget.config(bg=self.C["error_bg"])

        def _restore():
            for widget in widgets:
                widget.config(bg=self.C["display_bg"])

        self.root.after(self._error_flash_ms, _restore)

    # ── Tema ─────────────────────────────────────────────────────

    def _apply_theme(self):
        c = self.C
        self.root.configure(bg=c["bg"])
        for frame in (self._toggle_frame, self._keypad_frame, self._history_frame):
            frame.config(bg=c["bg"])
        self._display_frame.config(bg=c["display_bg"])
        self.expr_label.config(bg=c["display_bg"], fg=c["expr_fg"])
        self.main_label.config(bg=c["display_bg"], fg=c["result_fg"])

        for btn in (self.angle_btn, self.theme_btn, self._clear_history_btn):
            btn.config(bg=c["special"], fg=c["special_fg"],
                       activebackground=c["flash"])
        for command, btn in self._buttons.items():
            kind = self._button_kinds[command]
            btn.config(bg=c[kind], fg=c[f"{kind}_fg"],
                       activebackground=c["flash"])

        self._history_title.config(bg=c["bg"], fg=c["expr_fg"])
        self._history_title.master.config(bg=c["bg"])
        self.history_list.config(bg=c["display_bg"], fg=c["expr_fg"],
                                 selectbackground=c["special"])
