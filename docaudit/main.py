import asyncio
import signal

from docaudit.config.settings import Settings
from docaudit.database.connection import close_pool, init_pool
from docaudit.database.repositories.job_repository import JobRepository
from docaudit.logging.logger import Log
from docaudit.processor.factory import ProcessorFactory
from docaudit.worker.job_runner import JobRunner
from docaudit.worker.worker import Worker


async def main() -> None:
    """Entry point: settings -> pool -> processors -> worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(f"Starting docaudit worker ({settings.app_env})")
    await init_pool(settings)

    try:
        processor, batch_processor = ProcessorFactory.create(settings)
        job_repo = JobRepository()
        worker = Worker(job_repo, JobRunner(processor, batch_processor, job_repo), settings)
        asyncio.get_running_loop().add_signal_handler(signal.SIGTERM, worker.stop)
        await worker.run()
    finally:
        await close_pool()


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        Log.info("Interrupted")


if __name__ == "__main__":
    run()
