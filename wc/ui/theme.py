"""Alpine green palette and the stylesheet built from it."""

ALPINE_GREEN_DARK = "#1B5E38"
ALPINE_GREEN = "#2E7D52"
ALPINE_GREEN_LIGHT = "#4CAF7D"
ALPINE_GREEN_PALE = "#B9E4CC"
ALPINE_GREEN_BG = "#E8F5EC"
ALPINE_WHITE = "#F5FFF8"
WARM_AMBER = "#FFA726"
SOFT_RED = "#EF5350"

STATUS_COLORS = {
    "CLOCKED_OUT": "rgba(255, 255, 255, 0.6)",
    "WORKING": ALPINE_GREEN_PALE,
    "ON_BREAK": WARM_AMBER,
}


def build_stylesheet():
    return f"""
        QMainWindow, QWidget#central {{
            background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
                stop:0 {ALPINE_GREEN_DARK}, stop:0.5 {ALPINE_GREEN}, stop:1 {ALPINE_GREEN_LIGHT});
        }}
        QLabel#title {{ color: {ALPINE_WHITE}; font-size: 28px; font-weight: bold; }}
        QLabel#weekLabel {{ color: {ALPINE_GREEN_PALE}; font-size: 14px; }}
        QLabel#timer {{ color: {ALPINE_WHITE}; font-size: 56px; font-weight: 300; }}
        QPushButton#clockButton, QPushButton#breakButton {{
            color: white; border: none; border-radius: 40px; min-width: 80px; min-height: 80px;
            font-size: 13px; font-weight: 600;
        }}
        QPushButton#breakButton:disabled {{ background: rgba(255, 255, 255, 0.08); color: rgba(255, 255, 255, 0.3); }}
        QFrame#weekCard {{ background: {ALPINE_WHITE}; border-radius: 20px; }}
        QLabel#weekHeader {{ color: {ALPINE_GREEN_DARK}; font-size: 18px; font-weight: bold; }}
        QPushButton#resetButton {{ color: {SOFT_RED}; background: transparent; border: none; font-weight: 500; }}
        QPushButton#resetButton:disabled {{ color: rgba(239, 83, 80, 0.3); }}
        QPushButton#dayRow {{
            text-align: left; padding: 8px 12px; border: none; border-radius: 10px;
            background: transparent; color: {ALPINE_GREEN_DARK};
        }}
        QPushButton#dayRow[today="true"] {{ background: {ALPINE_GREEN_BG}; font-weight: bold; }}
        QLabel#total {{ color: {ALPINE_GREEN_DARK}; font-size: 16px; font-weight: bold; }}
    """


def clock_button_color(clocked_in):
    return SOFT_RED if clocked_in else ALPINE_GREEN_LIGHT


def break_button_color(on_break):
    return ALPINE_GREEN_LIGHT if on_break else WARM_AMBER
