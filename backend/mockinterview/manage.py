import typer
from pymongo import MongoClient

from mockinterview.config.settings import CHATS_COLLECTION, DOCUMENTS_COLLECTION, MONGO_DB, MONGO_URI

cli = typer.Typer(help="Custom management commands")


def get_db():
    return MongoClient(MONGO_URI)[MONGO_DB]


@cli.command()
def clean_db(confirm: bool = typer.Option(False, help="Must be True to actually delete data")):
    """
    Caution: Run to wipe all documents and chat sessions
    python -m mockinterview.manage clean-db --confirm
    """
    if not confirm:
        typer.echo("You must pass --confirm to actually clean the database.")
        raise typer.Exit(code=1)
    db = get_db()
    documents = db[DOCUMENTS_COLLECTION].delete_many({}).deleted_count
    chats = db[CHATS_COLLECTION].delete_many({}).deleted_count
    typer.echo(f"Deleted {documents} documents and {chats} chat sessions from MongoDB")


@cli.command()
def stats():
    """Counts per collection, including documents stored with failed embeddings."""
    db = get_db()
    typer.echo(f"documents: {db[DOCUMENTS_COLLECTION].count_documents({})}")
    typer.echo(f"degraded documents: {db[DOCUMENTS_COLLECTION].count_documents({'embedding_failed': True})}")
    typer.echo(f"chat sessions: {db[CHATS_COLLECTION].count_documents({})}")


if __name__ == "__main__":
    cli()
