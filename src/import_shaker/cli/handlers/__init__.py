from .shake import handle_shake, _shake_single_file, _print_batch_summary
