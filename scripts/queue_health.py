"""Job queue health/visibility script.

Shows the backend keys and pending job counts for the main and retry queues.

Usage:
  python scripts/queue_health.py
  python scripts/queue_health.py --namespace myapp --peek
"""
import sys
import argparse
from pathlib import Path
from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

load_dotenv()

from platform_monitoring import redact_url
from taskline.config import load_settings
from taskline.queue import QueueError, QueueIdentifier
from taskline.queue.adapters.redis_queue import RedisConfig, RedisJobQueue


def main():
    p = argparse.ArgumentParser()
    p.add_argument('--namespace', default=None, help='override QUEUE_NAMESPACE')
    p.add_argument('--peek', action='store_true', help='print the job at the head of each queue without removing it')
    args = p.parse_args()

    settings = load_settings()
    config = RedisConfig(url=settings.redis_url, namespace=args.namespace or settings.namespace)
    print('Redis:', redact_url(config.url))
    print('Retry limit:', settings.retry_count_limit)
    try:
        q = RedisJobQueue.new(config)
    except QueueError as e:
        print('connect error:', e)
        return 1

    try:
        for iden in QueueIdentifier:
            key = q.key(iden)
            try:
                print(f'{iden.name:<6} {key}: {q.size(iden)} pending')
                if args.peek:
                    print('       head:', q.peek(iden))
            except QueueError as e:
                print(f'{iden.name:<6} {key}: error: {e}')
    finally:
        q.close()
    return 0

if __name__ == '__main__':
    sys.exit(main())
