"""Per-user namespace access report."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

import pandas as pd

from nsreg.application.access_partitioner import AccessPartitioner
from nsreg.application.ports import GrantStore
from nsreg.domain.access_policy import authorization_reason
from nsreg.domain.models import UserContext

ACCESS_COLUMNS = [
    "user_id",
    "user_name",
    "namespace_id",
    "namespace",
    "cluster_code",
    "owner_name",
    "access",
    "reason",
]


def build_access_frame(
    partitioner: AccessPartitioner,
    grants: GrantStore,
    users: Iterable[UserContext],
) -> pd.DataFrame:
    """Return one row per (user, namespace) with the access decision."""
    rows: list[dict[str, object]] = []
    for user in users:
        partition = partitioner.partition(user)
        granted = grants.list_grants_for_user(user.user_id)
        for access, namespaces in (
            ("authorized", partition.authorized),
            ("unauthorized", partition.unauthorized),
        ):
            for ns in namespaces:
                rows.append(
                    {
                        "user_id": user.user_id,
                        "user_name": user.user_name,
                        "namespace_id": ns.id,
                        "namespace": ns.name,
                        "cluster_code": ns.cluster_code,
                        "owner_name": ns.owner_name,
                        "access": access,
                        "reason": authorization_reason(user, ns, granted) or "",
                    }
                )
    frame = pd.DataFrame(rows, columns=ACCESS_COLUMNS)
    return frame.sort_values(["user_id", "access", "namespace"], ignore_index=True)


def summarize_access(frame: pd.DataFrame, user_ids: Iterable[int]) -> pd.DataFrame:
    """Count authorized and unauthorized namespaces for each requested user."""
    index = pd.Index(list(dict.fromkeys(user_ids)), name="user_id")
    columns = ["authorized", "unauthorized"]
    if frame.empty:
        counts = pd.DataFrame(0, index=index, columns=columns)
    else:
        counts = (
            frame.groupby(["user_id", "access"])
            .size()
            .unstack(fill_value=0)
            .reindex(index=index, columns=columns, fill_value=0)
        )
    counts.columns.name = None
    return counts.reset_index()


def write_access_report(frame: pd.DataFrame, data_dir: str) -> Path:
    """Write access rows to a timestamped CSV and return its path."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = Path(data_dir) / f"namespace_access_{timestamp}.csv"
    frame.to_csv(out_file, index=False)
    return out_file
