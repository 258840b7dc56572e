"""
Minimal single-page PDF renderer for purchase order documents.
Writes plain PDF 1.4 objects by hand (Helvetica text only), no external PDF library.
"""
import re
import unicodedata

PAGE_WIDTH = 595
PAGE_HEIGHT = 842
FONT_SIZE = 11
LEFT_MARGIN = 50
TOP_Y = 800
LINE_HEIGHT = 16
BOTTOM_Y = 70

_COMBINING_MARKS = re.compile(r'[\u0300-\u036f]')
_NON_PRINTABLE = re.compile(r'[^\x20-\x7e]')
_RESERVED = re.compile(r'[()\\]')


def sanitize(text):
    """
    Reduce text to printable ASCII safe for a PDF literal string.

    Accents are stripped (NFD + drop combining marks), anything else outside
    0x20-0x7E becomes a space, and parentheses/backslashes are removed.
    """
    value = unicodedata.normalize('NFD', '' if text is None else str(text))
    value = _COMBINING_MARKS.sub('', value)
    value = _NON_PRINTABLE.sub(' ', value)
    value = _RESERVED.sub('', value)
    return value.strip()


def build_content_stream(lines):
    """Text operators for each line, top to bottom; lines past the bottom margin are dropped."""
    commands = []
    y = TOP_Y
    for line in lines:
        commands.append(f"BT /F1 {FONT_SIZE} Tf {LEFT_MARGIN} {y} Td ({sanitize(line)}) Tj ET")
        y -= LINE_HEIGHT
        if y < BOTTOM_Y:
            break
    return '\n'.join(commands)


def render(title, lines):
    """
    Render a one-page PDF with the title, a blank line, then each line.

    Args:
        title: Heading printed on the first line
        lines: Body lines in order (anything past the first page is silently clipped)

    Returns:
        PDF document as bytes
    """
    stream = build_content_stream([title, '', *lines])

    objects = [
        "1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj",
        "2 0 obj << /Type /Pages /Kids [3 0 R] /Count 1 >> endobj",
        (
            f"3 0 obj << /Type /Page /Parent 2 0 R /MediaBox [0 0 {PAGE_WIDTH} {PAGE_HEIGHT}] "
            "/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >> endobj"
        ),
        f"4 0 obj << /Length {len(stream)} >> stream\n{stream}\nendstream endobj",
        "5 0 obj << /Type /Font /Subtype /Type1 /BaseFont /Helvetica >> endobj",
    ]

    header = "%PDF-1.4\n"
    body = header
    offsets = [0]  # free-list head
    for obj in objects:
        offsets.append(len(body))
        body += f"{obj}\n"

    xref_start = len(body)
    xref = f"xref\n0 {len(objects) + 1}\n"
    xref += "0000000000 65535 f \n"
    for offset in offsets[1:]:
        xref += f"{offset:010d} 00000 n \n"

    trailer = f"trailer << /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_start}\n%%EOF"
    return (body + xref + trailer).encode('ascii')
