"""Table backup: dump requests, file naming and the mysqldump collaborator."""

import asyncio
import os
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from pathlib import Path

import structlog

from namerec.dbtree.core.config import BACKUP_TIMESTAMP_FORMAT
from namerec.dbtree.core.config import DBTreeSettings
from namerec.dbtree.core.exceptions import DBTreeBackupError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DumpRequest:
    """Connection parameters and table handed to the dump collaborator."""

    host: str
    port: int
    user: str
    database: str
    table: str
    password: str = field(default='', repr=False)
    cert_path: str = ''


def backup_filename(
    host: str,
    database: str,
    table: str,
    when: datetime | None = None,
    timestamp_format: str = BACKUP_TIMESTAMP_FORMAT,
) -> str:
    """
    Build the dump file name.

    Examples:
        >>> backup_filename('db1', 'shop', 'orders', datetime(2024, 3, 9, 14, 5, 7))
        'db1_shop_orders_2024-03-09_140507.sql'
    """
    stamp = (when or datetime.now()).strftime(timestamp_format)
    return f'{host}_{database}_{table}_{stamp}.sql'


class MysqldumpDumper:
    """
    Dumps one table with the mysqldump client.

    The password travels through MYSQL_PWD, never the command line.
    """

    def __init__(self, settings: DBTreeSettings) -> None:
        self._command = settings.dump_command

    def build_args(self, request: DumpRequest, destination: Path) -> list[str]:
        args = [
            self._command,
            f'--host={request.host}',
            f'--port={request.port}',
            f'--user={request.user}',
            '--add-drop-table',
            f'--result-file={destination}',
        ]
        if request.cert_path:
            args.append(f'--ssl-ca={request.cert_path}')
        args.extend([request.database, request.table])
        return args

    async def dump(self, request: DumpRequest, destination: Path) -> None:
        env = dict(os.environ)
        if request.password:
            env['MYSQL_PWD'] = request.password

        try:
            process = await asyncio.create_subprocess_exec(
                *self.build_args(request, destination),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except OSError as e:
            msg = f'Cannot run {self._command}: {e}'
            raise DBTreeBackupError(msg) from e

        _, stderr = await process.communicate()
        if process.returncode != 0:
            msg = stderr.decode(errors='replace').strip() or f'{self._command} exited with {process.returncode}'
            raise DBTreeBackupError(msg)
        logger.debug('dump_done', database=request.database, table=request.table, file=str(destination))
