"""Ядро: модели, классификация, сводка, запуск Lighthouse."""
