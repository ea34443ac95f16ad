from __future__ import annotations
from s3_archiver.config import MigrationConfig
from s3_archiver.migrate import migrate_older_than

if __name__ == "__main__":
    cfg = MigrationConfig(
        source_bucket="my-source",
        dest_bucket="my-archive",
        new_prefix="archive/",
        older_than_days=90,
        profile="default",
        progress=True,
    )
    res = migrate_older_than(cfg)
    print("Listed:", len(res["listed"]), "Copied:", len(res["copied"]), "Deleted:", len(res["deleted"]))
    if res["errors_copy"] or res["errors_delete"]:
        print("Errors(copy/delete):", len(res["errors_copy"]), "/", len(res["errors_delete"]))
