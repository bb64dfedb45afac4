# use in gunicorn as: env/bin/gunicorn bucketstore.api:app -c gunicorn.conf.py
# Each worker has its own blocking I/O pool (BUCKETSTORE_IO_WORKERS threads)

# Workers
workers = 4
worker_class = 'uvicorn.workers.UvicornWorker'

# Socket
bind = 'localhost:8080'

# Logging
# loglevel = 'debug'
# accesslog = '/tmp/bucketstore_access_log'
# errorlog =  '/tmp/bucketstore_error_log'
