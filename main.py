import argparse
import logging
import sys

from shipplan import data_handler, ledger, settings
from shipplan.branch import SelectionMode
from shipplan.errors import PlanError
from shipplan.logger import setup_logger
from shipplan.pipelines.check import CheckPipeline
from shipplan.pipelines.plan_import import PlanImportPipeline
from shipplan.session import PlanSession
from shipplan.status import Status, StatusStore
from shipplan.storage import PlanStore

logger = logging.getLogger("shipplan")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shipping plan ledger.")
    commands = parser.add_subparsers(dest="command", required=True)

    p = commands.add_parser("import", help="Import the latest shipping plan as a new group.")
    p.add_argument("--report", help="Plan CSV to import instead of the latest one in INPUT_DIR.")
    p.add_argument("--group", help="Name for the new group.")

    p = commands.add_parser("show", help="Print a group's summed entries.")
    p.add_argument("group", nargs="?", help="Group to show. Lists every group when omitted.")

    p = commands.add_parser("branch", help="Move FNSKUs of a group into a new group.")
    p.add_argument("group")
    p.add_argument("fnskus", nargs="+")
    p.add_argument(
        "--unselected", action="store_true", help="Move every FNSKU except the ones given."
    )

    p = commands.add_parser("check", help="Reconcile a scan sheet against a group.")
    p.add_argument("group")
    p.add_argument("--scan", help="Scan sheet CSV instead of the latest one in INPUT_DIR.")
    p.add_argument("--test", action="store_true", help="Skip the webhook post.")

    p = commands.add_parser("status", help="Show or change a group's status.")
    p.add_argument("group")
    p.add_argument("--set", choices=[s.value for s in Status], dest="new_status")
    p.add_argument("--advance", action="store_true", help="Move to the next stage.")

    p = commands.add_parser("export", help="Write the check file of a group.")
    p.add_argument("group")

    return parser


def run_command(args: argparse.Namespace, session: PlanSession) -> int:
    if args.command == "import":
        summary = PlanImportPipeline(session, report_path=args.report, group=args.group).run()
        return 0 if summary else 1

    if args.command == "show":
        if not args.group:
            for group in session.store.groups():
                record = session.status_store.record(group)
                logger.info(f"{record.group}: {record.status}")
            return 0
        entries = session.open_group(args.group)
        logger.info(ledger.summary_frame(entries).to_string())
        logger.info(
            f"\nUnits: {ledger.total_units(entries)}  Cases: {ledger.count_real_cases(entries)}  "
            f"Status: {session.status}"
        )
        scanned = session.last_scan()
        if scanned:
            logger.info(
                f"Last scan: {ledger.total_units(scanned)} units in {ledger.count_real_cases(scanned)} cases"
            )
        return 0

    if args.command == "branch":
        session.open_group(args.group)
        mode = SelectionMode.UNSELECTED if args.unselected else SelectionMode.SELECTED
        result = session.branch(args.fnskus, mode)
        logger.info(
            f"'{result.source}' now holds {ledger.total_units(session.entries)} units; "
            f"'{result.branch}' holds {result.moved_units}."
        )
        return 0

    if args.command == "check":
        session.open_group(args.group)
        summary = CheckPipeline(session, scan_path=args.scan, test_mode=args.test).run()
        return 0 if summary else 1

    if args.command == "status":
        session.open_group(args.group)
        if args.new_status:
            session.mark(Status(args.new_status))
        elif args.advance:
            session.advance()
        logger.info(f"{args.group}: {session.status}")
        return 0

    if args.command == "export":
        entries = session.open_group(args.group)
        data_handler.write_check_file(entries, args.group)
        return 0

    return 1


def main(argv=None) -> int:
    setup_logger("shipplan")
    args = build_parser().parse_args(argv)
    session = PlanSession(
        store=PlanStore(settings.STORAGE_DIR),
        status_store=StatusStore(settings.STATUS_DIR),
        scan_store=PlanStore(settings.SCAN_DIR),
    )
    try:
        return run_command(args, session)
    except PlanError as e:
        logger.error(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
