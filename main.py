"""
Заполняет таблицу cases тестовыми обращениями.

Запуск: python main.py [--clear]
"""

import sys

from case_fetcher import SAMPLE_CASES
from database import clear_cases, count_cases, create_db_engine, init_db, save_cases


if __name__ == '__main__':
    engine = create_db_engine()

    try:
        init_db(engine)

        if "--clear" in sys.argv:
            clear_cases(engine)

        ids = save_cases(engine, SAMPLE_CASES)
        print(f'Inserted cases: {ids}')

        print('-' * 50)
        print(f'Number of cases in the db: {count_cases(engine)}')

    finally:
        engine.dispose()
