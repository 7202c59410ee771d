"""Ready-made custom analyzers, enabled from YAML configuration.

These are native analyzers: they implement the plugin contract directly
instead of going through the legacy adapter. None of them is part of
the core set; enable one with a custom entry such as::

    analyzers:
      custom:
        - id: redis-memory
          class: magento_doctor.plugins.redis_memory:RedisMemoryAnalyzer
          category: redis
          config: {memory_limit_mb: 2048}

See ``examples/magento-doctor.yaml`` for all of them.
"""
