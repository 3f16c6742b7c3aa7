"""
Reports for the Security Console
Tabulated text reports; generating one is itself an audited action
"""
from tabulate import tabulate

from config import AUDIT_EVENTS
from enums import Permission
from risk_classifier import ActionKind, classify_risk


def format_timestamp(value):
    return value.strftime("%Y-%m-%d %H:%M") if value else ""


def security_event_rows(events):
    rows = []
    for event in events:
        if event.authorization_info:
            authorized = f"Yes ({event.authorization_info.authorized_by})"
        elif event.requires_authorization:
            authorized = "Pending"
        else:
            authorized = "-"
        rows.append([
            format_timestamp(event.timestamp),
            event.user,
            event.action,
            event.risk_level.value,
            authorized,
        ])
    return rows


def export_security_report(context, actor):
    """
    Export the full security log as a text report
    Requires view_security; logs a data export event
    """
    context.permission_checker.require_permission(actor, Permission.VIEW_SECURITY)

    events = context.security_log.get_security_events()
    headers = ["Timestamp", "User", "Action", "Risk", "Authorized"]

    lines = [
        "Security Report",
        f"Generated: {format_timestamp(context.security_log.clock())} by {actor.email}",
        "",
        tabulate(security_event_rows(events), headers=headers, tablefmt="grid"),
        "",
        f"Events: {len(events)}",
    ]

    context.security_log.append(
        actor.email,
        AUDIT_EVENTS["DATA_EXPORT"],
        f"Exported {len(events)} security events",
        classify_risk(ActionKind.DATA_EXPORT),
    )
    return "\n".join(lines)


def generate_financial_report(context, actor):
    """
    Summarize uploaded invoices
    Requires generate_reports; logs a report generation event
    """
    context.permission_checker.require_permission(actor, Permission.GENERATE_REPORTS)

    invoices = context.upload_manager.list_uploads('invoice')
    rows = [
        [upload.id, upload.file_name, f"{upload.amount:.2f}", upload.uploaded_by,
         format_timestamp(upload.uploaded_at)]
        for upload in invoices
    ]
    total = sum(upload.amount for upload in invoices)

    lines = [
        "Financial Report",
        tabulate(rows, headers=["ID", "File", "Amount", "Uploaded By", "Uploaded"],
                 tablefmt="grid"),
        f"Invoices: {len(invoices)}  Total: {total:.2f}",
    ]

    context.security_log.append(
        actor.email,
        AUDIT_EVENTS["REPORT_GENERATION"],
        f"Financial report over {len(invoices)} invoices",
        classify_risk(ActionKind.REPORT_GENERATION),
    )
    return "\n".join(lines)
