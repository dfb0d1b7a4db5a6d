import os

from yap import log


def test_log_files(tmpdir):
    log_dir = str(tmpdir.join("logs"))
    handler = log.setup_local_logging({"log_dir": log_dir})
    try:
        log.logger.info("Total samples: 2")
        log.logger.debug("Queued 2 samples")
        log.logger_cl.debug("fastp -i a_R1.fq -I a_R2.fq")
        log.logger_stdout.info("tool output")
    finally:
        handler.pop_application()
        handler.close()
    with open(os.path.join(log_dir, "yap.log")) as in_handle:
        main_log = in_handle.read()
    with open(os.path.join(log_dir, "yap-debug.log")) as in_handle:
        debug_log = in_handle.read()
    with open(os.path.join(log_dir, "yap-commands.log")) as in_handle:
        cl_log = in_handle.read()
    assert "Total samples: 2" in main_log
    assert "Queued 2 samples" not in main_log
    assert "Queued 2 samples" in debug_log
    assert "fastp -i" in cl_log
    assert "fastp -i" not in main_log
    assert "tool output" not in main_log
