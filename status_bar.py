import time


def render_status(context, width):
    """
    context keys: status_msg, status_until, mode, source, query, selected,
                   page_index, page_total, page_start, page_end, total_rows,
                   record_total
    """
    text = ""
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    else:
        mode = context.get("mode", "TABLE")
        source = context.get("source") or ""
        query = context.get("query") or ""
        selected = context.get("selected", 0)
        page_total = context.get("page_total", 1)
        page_index = context.get("page_index", 1)
        page_start = context.get("page_start", 0)
        page_end = context.get("page_end", page_start)
        total_rows = context.get("total_rows", 0)
        record_total = context.get("record_total", total_rows)

        if total_rows:
            rows = f"rows {page_start + 1}-{max(page_start + 1, page_end)} of {total_rows}"
        else:
            rows = "rows 0 of 0"
        parts = [mode]
        if source:
            parts.append(source)
        if query:
            parts.append(f"/{query} ({total_rows}/{record_total})")
        parts.append(f"{selected} selected")
        parts.append(f"Page {page_index}/{page_total} {rows}")
        text = " " + " | ".join(parts)

    return text.ljust(width)[:width]
