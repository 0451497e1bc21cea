import atexit
import logging
from concurrent.futures import ThreadPoolExecutor
from threading import Lock

from celery import shared_task
from django.conf import settings
from django.db import connection, transaction

from .exceptions import EntityNotFound
from .orchestrator import generate_automatic_translations, generate_translations_for_language

logger = logging.getLogger(__name__)

# sans broker : les tâches partent dans un pool de threads du process web
_EXECUTOR: ThreadPoolExecutor | None = None
_executor_lock = Lock()


@shared_task(bind=True)
def generate_translations_task(self, entity_type: str, entity_id: int):
    logger.info("generate_translations_task: start task_id=%s entity_type=%s entity_id=%s",
                self.request.id, entity_type, entity_id)
    try:
        outcomes = generate_automatic_translations(entity_type, entity_id)
    except EntityNotFound as e:
        logger.warning("generate_translations_task: aborted, %s", e)
        return []
    except Exception:
        logger.exception("generate_translations_task: crashed entity_type=%s entity_id=%s", entity_type, entity_id)
        raise
    return [o.as_dict() for o in outcomes]


@shared_task(bind=True)
def translate_language_task(self, language_id: int):
    logger.info("translate_language_task: start task_id=%s language_id=%s", self.request.id, language_id)
    try:
        outcomes = generate_translations_for_language(language_id)
    except Exception:
        logger.exception("translate_language_task: crashed language_id=%s", language_id)
        raise
    return [o.as_dict() for o in outcomes]


def _get_executor() -> ThreadPoolExecutor:
    global _EXECUTOR
    with _executor_lock:
        if _EXECUTOR is None:
            _EXECUTOR = ThreadPoolExecutor(
                max_workers=getattr(settings, "TRANSLATION_BACKGROUND_WORKERS", 2),
                thread_name_prefix="translations",
            )
        return _EXECUTOR


def shutdown_background_executor(wait: bool = True) -> None:
    """Arrête le pool local ; avec wait=True, attend la fin des tâches déjà soumises."""
    global _EXECUTOR
    with _executor_lock:
        executor, _EXECUTOR = _EXECUTOR, None
    if executor is not None:
        executor.shutdown(wait=wait)


atexit.register(shutdown_background_executor, wait=False)


def _run_in_background(task, args) -> None:
    try:
        result = task.apply(args=args)
        if result.failed():
            logger.error("background task %s failed args=%s: %r", task.name, args, result.result)
    except Exception:
        logger.exception("background task %s crashed args=%s", task.name, args)
    finally:
        # chaque thread ouvre sa propre connexion
        connection.close()


def _enqueue(task, *args) -> None:
    # la réponse HTTP est déjà partie : une erreur ici ne doit que se voir dans les logs
    try:
        if settings.CELERY_TASK_ALWAYS_EAGER and not getattr(settings, "TRANSLATION_TASKS_INLINE", False):
            _get_executor().submit(_run_in_background, task, args)
        else:
            task.delay(*args)
    except Exception:
        logger.exception("could not enqueue %s args=%s", task.name, args)


def schedule_automatic_translations(entity_type: str, entity_id: int) -> None:
    """Lance la génération après le commit de la transaction courante, sans l'attendre."""
    logger.info("schedule_automatic_translations: entity_type=%s entity_id=%s", entity_type, entity_id)
    transaction.on_commit(lambda: _enqueue(generate_translations_task, str(entity_type), entity_id))


def schedule_language_sweep(language_id: int) -> None:
    logger.info("schedule_language_sweep: language_id=%s", language_id)
    transaction.on_commit(lambda: _enqueue(translate_language_task, language_id))
