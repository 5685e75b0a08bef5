from flask import Response, stream_with_context


def success(data=None, **extra):
    """Standard {"success": true, "data": ...} body"""
    body = {"success": True}
    if data is not None or "message" not in extra:
        body["data"] = data
    body.update(extra)
    return body


def event_stream(channel):
    """Server-Sent Events response draining a ProgressChannel"""
    return Response(
        stream_with_context(channel.sse()),
        mimetype='text/event-stream',
        headers={
            'Cache-Control': 'no-cache',
            'X-Accel-Buffering': 'no',
        }
    )


def csv_download(content, filename):
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
