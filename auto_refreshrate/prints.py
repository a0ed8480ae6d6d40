from os import get_terminal_size
import sys

COLOR = sys.stdout.isatty()
try: terminal_width = min(get_terminal_size(0)[0], 60)
except OSError: terminal_width = 60

def colored(*values:str, color) -> str:
    return f'\x1b[38;5;{color}m{" ".join(values)}\x1b[0m' if COLOR and color else ' '.join(values)

def print_separator(color=None) -> None: print(colored('─'*terminal_width, color=color))

def print_header(*values:str, color=None) -> str:
    head = ' '.join(values)
    sep = '─'*max(((terminal_width - len(head)) // 2 - 1), 2)
    line = colored(f'{sep} {head} {sep}', color=color)
    print('\n'+line+'\n')
    return line

def print_colon(previous_value:str, *next_values:object, color=None) -> None: print(colored(previous_value, color=color)+':', *next_values)

def print_block(block_title:str, *lines:object, color=None) -> None:
    print_header(block_title, color=color)
    for line in lines: print(line)
    print()
    print_separator(color)

def print_error(*values:object) -> None: print_colon('Error', *values, color=9)

def print_info(*values:object) -> None: print_colon('Info', *values, color=12)
def print_info_block(info_title:str, *lines:object) -> None: print_block(info_title+' infos', *lines, color=12)

def print_table(rows:list, header:tuple=()) -> None:
    """Print rows of cells as left-aligned columns."""
    rows = [tuple(str(cell) for cell in row) for row in rows]
    if header: rows.insert(0, tuple(header))
    if not rows: return
    widths = [max(len(row[i]) for row in rows if i < len(row)) for i in range(max(map(len, rows)))]
    for n, row in enumerate(rows):
        print('  '.join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip())
        if header and n == 0: print('  '.join('-'*w for w in widths))
